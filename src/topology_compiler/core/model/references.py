# src/topology_compiler/core/model/references.py
"""
Referências a objetos (apiVersion/kind/name/namespace).

Uma `ObjectReference` é a forma canônica pela qual objetos calculados
apontam uns para os outros (Cluster → InfrastructureCluster, ControlPlane →
InfrastructureMachineTemplate, MachineDeployment → templates).

Invariantes:
    - Referências são imutáveis (frozen)
    - `group_kind()` segue a convenção `Kind.group` (ou apenas `Kind`
      quando o grupo é vazio, ex.: apiVersion `v1`)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple


def split_api_version(api_version: str) -> Tuple[str, str]:
    """Separa `group/version` em (group, version); `v1` → ("", "v1")."""
    if not api_version:
        return "", ""
    if "/" not in api_version:
        return "", api_version
    group, version = api_version.split("/", 1)
    return group, version


@dataclass(frozen=True)
class ObjectReference:
    """Referência imutável a um objeto por group/version/kind/name/namespace."""

    api_version: str = ""
    kind: str = ""
    name: str = ""
    namespace: str = ""

    @property
    def group(self) -> str:
        return split_api_version(self.api_version)[0]

    def group_kind(self) -> str:
        group = self.group
        if not group:
            return self.kind
        return f"{self.kind}.{group}"

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "name": self.name,
        }
        if self.namespace:
            out["namespace"] = self.namespace
        return out

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["ObjectReference"]:
        if not data:
            return None
        return cls(
            api_version=str(data.get("apiVersion", "") or ""),
            kind=str(data.get("kind", "") or ""),
            name=str(data.get("name", "") or ""),
            namespace=str(data.get("namespace", "") or ""),
        )
