# src/topology_compiler/core/model/state.py
"""
Current State e Desired State de uma instância de cluster.

`CurrentState` é o snapshot somente-leitura do que existe hoje;
`DesiredState` é a única saída do compilador. Ambos compartilham as mesmas
estruturas de sub-estado (control plane e machine deployments).

Invariantes:
    - Um `DesiredState` é sempre totalmente preenchido
    - As chaves de `DesiredState.machine_deployments` são exatamente os nomes
      de instância declarados na Topology
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .objects import Cluster, MachineDeployment, Unstructured


@dataclass
class ControlPlaneState:
    object: Optional[Unstructured] = None
    infrastructure_machine_template: Optional[Unstructured] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "object": None if self.object is None else self.object.to_dict(),
            "infrastructureMachineTemplate": (
                None
                if self.infrastructure_machine_template is None
                else self.infrastructure_machine_template.to_dict()
            ),
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ControlPlaneState":
        data = data or {}
        return cls(
            object=Unstructured.from_dict(data.get("object")),
            infrastructure_machine_template=Unstructured.from_dict(
                data.get("infrastructureMachineTemplate")
            ),
        )


@dataclass
class MachineDeploymentState:
    object: Optional[MachineDeployment] = None
    bootstrap_template: Optional[Unstructured] = None
    infrastructure_machine_template: Optional[Unstructured] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "object": None if self.object is None else self.object.to_dict(),
            "bootstrapTemplate": None if self.bootstrap_template is None else self.bootstrap_template.to_dict(),
            "infrastructureMachineTemplate": (
                None
                if self.infrastructure_machine_template is None
                else self.infrastructure_machine_template.to_dict()
            ),
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "MachineDeploymentState":
        data = data or {}
        obj = data.get("object")
        return cls(
            object=None if obj is None else MachineDeployment.from_dict(obj),
            bootstrap_template=Unstructured.from_dict(data.get("bootstrapTemplate")),
            infrastructure_machine_template=Unstructured.from_dict(
                data.get("infrastructureMachineTemplate")
            ),
        )


@dataclass
class CurrentState:
    """Snapshot observado de uma instância de cluster (entrada somente-leitura)."""

    cluster: Cluster
    control_plane: Optional[ControlPlaneState] = None
    machine_deployments: Dict[str, MachineDeploymentState] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cluster": self.cluster.to_dict(),
            "controlPlane": None if self.control_plane is None else self.control_plane.to_dict(),
            "machineDeployments": {
                name: md.to_dict() for name, md in sorted(self.machine_deployments.items())
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CurrentState":
        cp = data.get("controlPlane")
        return cls(
            cluster=Cluster.from_dict(data.get("cluster") or {}),
            control_plane=None if cp is None else ControlPlaneState.from_dict(cp),
            machine_deployments={
                str(name): MachineDeploymentState.from_dict(md)
                for name, md in (data.get("machineDeployments") or {}).items()
            },
        )


@dataclass
class DesiredState:
    """Grafo alvo calculado para uma instância de cluster."""

    cluster: Cluster
    infrastructure_cluster: Unstructured
    control_plane: ControlPlaneState
    machine_deployments: Dict[str, MachineDeploymentState] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cluster": self.cluster.to_dict(),
            "infrastructureCluster": self.infrastructure_cluster.to_dict(),
            "controlPlane": self.control_plane.to_dict(),
            "machineDeployments": {
                name: md.to_dict() for name, md in self.machine_deployments.items()
            },
        }
