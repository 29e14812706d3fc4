# src/topology_compiler/core/model/objects.py
"""
Objetos manipulados pelo compilador.

Dois tipos de representação convivem neste módulo:

    - `Unstructured`: objeto semiestruturado (dict) usado para templates e para
      objetos de provedores externos (InfrastructureCluster, ControlPlane,
      Bootstrap/InfrastructureMachine templates). O compilador interpreta
      apenas `metadata` e os poucos caminhos expostos pelo pacote `contract`;
      o restante do corpo permanece opaco.
    - `Cluster` e `MachineDeployment`: objetos tipados do próprio Cluster API,
      cujos campos o compilador lê e escreve diretamente.

Decisões arquiteturais:
    - Cópias são sempre profundas (`deep_copy`), sem compartilhamento de
      estado entre Current State, Blueprint e Desired State
    - Campos de metadata vazios são removidos, como no apiserver

Limites explícitos:
    - Não valida schema de provedores
    - Não conhece semântica de `spec` além dos caminhos do contrato
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from topology_compiler.core.constants import (
    CLUSTER_API_VERSION,
    CLUSTER_KIND,
    MACHINE_DEPLOYMENT_KIND,
)

from .references import ObjectReference


def _copy_str_map(data: Optional[Dict[str, Any]]) -> Dict[str, str]:
    return {str(k): "" if v is None else str(v) for k, v in (data or {}).items()}


@dataclass
class ObjectMeta:
    """Labels e anotações (metadata parcial usada em classes, topologia e templates)."""

    labels: Dict[str, str] = field(default_factory=dict)
    annotations: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        if self.labels:
            out["labels"] = dict(self.labels)
        if self.annotations:
            out["annotations"] = dict(self.annotations)
        return out

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ObjectMeta":
        data = data or {}
        return cls(
            labels=_copy_str_map(data.get("labels")),
            annotations=_copy_str_map(data.get("annotations")),
        )


# ---------------------------------------------------------------------------
# Unstructured
# ---------------------------------------------------------------------------

@dataclass
class Unstructured:
    """Objeto semiestruturado no formato Kubernetes (apiVersion/kind/metadata/spec)."""

    object: Dict[str, Any] = field(default_factory=dict)

    # -----------------------------
    # Helpers internos de metadata
    # -----------------------------
    def _metadata(self) -> Dict[str, Any]:
        meta = self.object.get("metadata")
        if not isinstance(meta, dict):
            meta = {}
            self.object["metadata"] = meta
        return meta

    def _get_meta(self, key: str) -> Any:
        meta = self.object.get("metadata")
        if not isinstance(meta, dict):
            return None
        return meta.get(key)

    def _set_meta(self, key: str, value: Any) -> None:
        if value in (None, "", [], {}):
            meta = self.object.get("metadata")
            if isinstance(meta, dict):
                meta.pop(key, None)
            return
        self._metadata()[key] = value

    # -----------------------------
    # Type meta
    # -----------------------------
    @property
    def api_version(self) -> str:
        return str(self.object.get("apiVersion", "") or "")

    @api_version.setter
    def api_version(self, value: str) -> None:
        self.object["apiVersion"] = value

    @property
    def kind(self) -> str:
        return str(self.object.get("kind", "") or "")

    @kind.setter
    def kind(self, value: str) -> None:
        self.object["kind"] = value

    # -----------------------------
    # Object meta
    # -----------------------------
    @property
    def name(self) -> str:
        return str(self._get_meta("name") or "")

    @name.setter
    def name(self, value: str) -> None:
        self._set_meta("name", value)

    @property
    def namespace(self) -> str:
        return str(self._get_meta("namespace") or "")

    @namespace.setter
    def namespace(self, value: str) -> None:
        self._set_meta("namespace", value)

    @property
    def resource_version(self) -> str:
        return str(self._get_meta("resourceVersion") or "")

    @resource_version.setter
    def resource_version(self, value: str) -> None:
        self._set_meta("resourceVersion", value)

    @property
    def uid(self) -> str:
        return str(self._get_meta("uid") or "")

    @uid.setter
    def uid(self, value: str) -> None:
        self._set_meta("uid", value)

    @property
    def self_link(self) -> str:
        return str(self._get_meta("selfLink") or "")

    @self_link.setter
    def self_link(self, value: str) -> None:
        self._set_meta("selfLink", value)

    @property
    def finalizers(self) -> List[str]:
        return list(self._get_meta("finalizers") or [])

    @finalizers.setter
    def finalizers(self, value: Optional[List[str]]) -> None:
        self._set_meta("finalizers", list(value) if value else None)

    def get_labels(self) -> Dict[str, str]:
        return _copy_str_map(self._get_meta("labels"))

    def set_labels(self, labels: Optional[Dict[str, str]]) -> None:
        self._set_meta("labels", dict(labels) if labels else None)

    def get_annotations(self) -> Dict[str, str]:
        return _copy_str_map(self._get_meta("annotations"))

    def set_annotations(self, annotations: Optional[Dict[str, str]]) -> None:
        self._set_meta("annotations", dict(annotations) if annotations else None)

    # -----------------------------
    # Cópia e serialização
    # -----------------------------
    def deep_copy(self) -> "Unstructured":
        return Unstructured(object=copy.deepcopy(self.object))

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self.object)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["Unstructured"]:
        if data is None:
            return None
        return cls(object=copy.deepcopy(data))


# ---------------------------------------------------------------------------
# Cluster
# ---------------------------------------------------------------------------

@dataclass
class ClusterSpec:
    """
    Campos do Cluster gerenciados pelo compilador.

    `extra` guarda o restante do spec (ex.: `topology`, `clusterNetwork`)
    de forma opaca, apenas para round-trip.
    """

    infrastructure_ref: Optional[ObjectReference] = None
    control_plane_ref: Optional[ObjectReference] = None
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Cluster:
    name: str = ""
    namespace: str = ""
    labels: Dict[str, str] = field(default_factory=dict)
    annotations: Dict[str, str] = field(default_factory=dict)
    spec: ClusterSpec = field(default_factory=ClusterSpec)
    api_version: str = CLUSTER_API_VERSION
    kind: str = CLUSTER_KIND

    def deep_copy(self) -> "Cluster":
        return copy.deepcopy(self)

    def to_dict(self) -> Dict[str, Any]:
        spec: Dict[str, Any] = copy.deepcopy(self.spec.extra)
        if self.spec.infrastructure_ref is not None:
            spec["infrastructureRef"] = self.spec.infrastructure_ref.to_dict()
        if self.spec.control_plane_ref is not None:
            spec["controlPlaneRef"] = self.spec.control_plane_ref.to_dict()
        metadata: Dict[str, Any] = {"name": self.name}
        if self.namespace:
            metadata["namespace"] = self.namespace
        if self.labels:
            metadata["labels"] = dict(self.labels)
        if self.annotations:
            metadata["annotations"] = dict(self.annotations)
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "metadata": metadata,
            "spec": spec,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Cluster":
        metadata = data.get("metadata") or {}
        spec = dict(data.get("spec") or {})
        infra_ref = ObjectReference.from_dict(spec.pop("infrastructureRef", None))
        cp_ref = ObjectReference.from_dict(spec.pop("controlPlaneRef", None))
        return cls(
            name=str(metadata.get("name", "") or ""),
            namespace=str(metadata.get("namespace", "") or ""),
            labels=_copy_str_map(metadata.get("labels")),
            annotations=_copy_str_map(metadata.get("annotations")),
            spec=ClusterSpec(
                infrastructure_ref=infra_ref,
                control_plane_ref=cp_ref,
                extra=copy.deepcopy(spec),
            ),
            api_version=str(data.get("apiVersion") or CLUSTER_API_VERSION),
            kind=str(data.get("kind") or CLUSTER_KIND),
        )


# ---------------------------------------------------------------------------
# MachineDeployment
# ---------------------------------------------------------------------------

@dataclass
class MachineSpec:
    cluster_name: str = ""
    # None => versão não definida (nunca string vazia)
    version: Optional[str] = None
    bootstrap_config_ref: Optional[ObjectReference] = None
    infrastructure_ref: ObjectReference = field(default_factory=ObjectReference)


@dataclass
class MachineTemplateSpec:
    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: MachineSpec = field(default_factory=MachineSpec)


@dataclass
class MachineDeploymentSpec:
    cluster_name: str = ""
    # None => réplicas não gerenciadas pela topologia (não equivale a 0)
    replicas: Optional[int] = None
    template: MachineTemplateSpec = field(default_factory=MachineTemplateSpec)


@dataclass
class MachineDeployment:
    name: str = ""
    namespace: str = ""
    labels: Dict[str, str] = field(default_factory=dict)
    annotations: Dict[str, str] = field(default_factory=dict)
    spec: MachineDeploymentSpec = field(default_factory=MachineDeploymentSpec)
    api_version: str = CLUSTER_API_VERSION
    kind: str = MACHINE_DEPLOYMENT_KIND

    def deep_copy(self) -> "MachineDeployment":
        return copy.deepcopy(self)

    def to_dict(self) -> Dict[str, Any]:
        machine = self.spec.template.spec
        machine_spec: Dict[str, Any] = {
            "clusterName": machine.cluster_name,
            "bootstrap": {},
            "infrastructureRef": machine.infrastructure_ref.to_dict(),
        }
        if machine.bootstrap_config_ref is not None:
            machine_spec["bootstrap"]["configRef"] = machine.bootstrap_config_ref.to_dict()
        if machine.version is not None:
            machine_spec["version"] = machine.version

        spec: Dict[str, Any] = {
            "clusterName": self.spec.cluster_name,
            "template": {
                "metadata": self.spec.template.metadata.to_dict(),
                "spec": machine_spec,
            },
        }
        if self.spec.replicas is not None:
            spec["replicas"] = self.spec.replicas

        metadata: Dict[str, Any] = {"name": self.name}
        if self.namespace:
            metadata["namespace"] = self.namespace
        if self.labels:
            metadata["labels"] = dict(self.labels)
        if self.annotations:
            metadata["annotations"] = dict(self.annotations)
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "metadata": metadata,
            "spec": spec,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MachineDeployment":
        metadata = data.get("metadata") or {}
        spec = data.get("spec") or {}
        template = spec.get("template") or {}
        machine = template.get("spec") or {}
        bootstrap = machine.get("bootstrap") or {}
        replicas = spec.get("replicas")
        return cls(
            name=str(metadata.get("name", "") or ""),
            namespace=str(metadata.get("namespace", "") or ""),
            labels=_copy_str_map(metadata.get("labels")),
            annotations=_copy_str_map(metadata.get("annotations")),
            spec=MachineDeploymentSpec(
                cluster_name=str(spec.get("clusterName", "") or ""),
                replicas=None if replicas is None else int(replicas),
                template=MachineTemplateSpec(
                    metadata=ObjectMeta.from_dict(template.get("metadata")),
                    spec=MachineSpec(
                        cluster_name=str(machine.get("clusterName", "") or ""),
                        version=machine.get("version"),
                        bootstrap_config_ref=ObjectReference.from_dict(bootstrap.get("configRef")),
                        infrastructure_ref=ObjectReference.from_dict(machine.get("infrastructureRef"))
                        or ObjectReference(),
                    ),
                ),
            ),
            api_version=str(data.get("apiVersion") or CLUSTER_API_VERSION),
            kind=str(data.get("kind") or MACHINE_DEPLOYMENT_KIND),
        )
