# src/topology_compiler/core/model/blueprint.py
"""
Blueprint e Topology.

O Blueprint é a descrição reutilizável, por classe, do formato de um cluster:
o ClusterClass (referências aos templates e metadados de classe), os templates
já resolvidos e a Topology da instância que está sendo compilada.

A Topology expressa a intenção específica da instância: versão alvo,
réplicas e metadados do control plane, e a lista ordenada de worker groups
(MachineDeployments), cada um apontando para uma classe do Blueprint.

Invariantes:
    - O compilador nunca muta um Blueprint
    - `replicas` é `Optional[int]`: `None` significa "não gerenciado",
      nunca `0`
    - A ordem de `Topology.machine_deployments` é preservada

Limites explícitos:
    - Não resolve templates a partir de um backing store
    - Não valida admissão de templates
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .objects import ObjectMeta, Unstructured
from .references import ObjectReference


def _optional_int(value: Any) -> Optional[int]:
    return None if value is None else int(value)


# ---------------------------------------------------------------------------
# Topology
# ---------------------------------------------------------------------------

@dataclass
class ControlPlaneTopology:
    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    replicas: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"metadata": self.metadata.to_dict()}
        if self.replicas is not None:
            out["replicas"] = self.replicas
        return out

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ControlPlaneTopology":
        data = data or {}
        return cls(
            metadata=ObjectMeta.from_dict(data.get("metadata")),
            replicas=_optional_int(data.get("replicas")),
        )


@dataclass
class MachineDeploymentTopology:
    """Entrada de worker group: classe do Blueprint + nome único da instância."""

    class_name: str
    name: str
    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    replicas: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "class": self.class_name,
            "name": self.name,
            "metadata": self.metadata.to_dict(),
        }
        if self.replicas is not None:
            out["replicas"] = self.replicas
        return out

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MachineDeploymentTopology":
        return cls(
            class_name=str(data.get("class", "") or ""),
            name=str(data.get("name", "") or ""),
            metadata=ObjectMeta.from_dict(data.get("metadata")),
            replicas=_optional_int(data.get("replicas")),
        )


@dataclass
class Topology:
    version: str
    control_plane: ControlPlaneTopology = field(default_factory=ControlPlaneTopology)
    machine_deployments: List[MachineDeploymentTopology] = field(default_factory=list)
    class_name: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "class": self.class_name,
            "version": self.version,
            "controlPlane": self.control_plane.to_dict(),
            "workers": {
                "machineDeployments": [md.to_dict() for md in self.machine_deployments],
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Topology":
        workers = data.get("workers") or {}
        return cls(
            class_name=str(data.get("class", "") or ""),
            version=str(data.get("version", "") or ""),
            control_plane=ControlPlaneTopology.from_dict(data.get("controlPlane")),
            machine_deployments=[
                MachineDeploymentTopology.from_dict(md)
                for md in (workers.get("machineDeployments") or [])
            ],
        )


# ---------------------------------------------------------------------------
# ClusterClass
# ---------------------------------------------------------------------------

@dataclass
class ControlPlaneClass:
    ref: ObjectReference
    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    machine_infrastructure_ref: Optional[ObjectReference] = None


@dataclass
class ClusterClass:
    """Subconjunto do ClusterClass lido pelo compilador."""

    name: str
    infrastructure_ref: ObjectReference
    control_plane: ControlPlaneClass
    namespace: str = ""

    def to_dict(self) -> Dict[str, Any]:
        control_plane: Dict[str, Any] = {
            "metadata": self.control_plane.metadata.to_dict(),
            "ref": self.control_plane.ref.to_dict(),
        }
        if self.control_plane.machine_infrastructure_ref is not None:
            control_plane["machineInfrastructure"] = {
                "ref": self.control_plane.machine_infrastructure_ref.to_dict(),
            }
        return {
            "metadata": {"name": self.name, "namespace": self.namespace},
            "spec": {
                "infrastructure": {"ref": self.infrastructure_ref.to_dict()},
                "controlPlane": control_plane,
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ClusterClass":
        metadata = data.get("metadata") or {}
        spec = data.get("spec") or {}
        cp = spec.get("controlPlane") or {}
        machine_infra = cp.get("machineInfrastructure") or {}
        return cls(
            name=str(metadata.get("name", "") or ""),
            namespace=str(metadata.get("namespace", "") or ""),
            infrastructure_ref=ObjectReference.from_dict((spec.get("infrastructure") or {}).get("ref"))
            or ObjectReference(),
            control_plane=ControlPlaneClass(
                ref=ObjectReference.from_dict(cp.get("ref")) or ObjectReference(),
                metadata=ObjectMeta.from_dict(cp.get("metadata")),
                machine_infrastructure_ref=ObjectReference.from_dict(machine_infra.get("ref")),
            ),
        )


# ---------------------------------------------------------------------------
# Blueprint
# ---------------------------------------------------------------------------

@dataclass
class ControlPlaneBlueprint:
    template: Unstructured
    infrastructure_machine_template: Optional[Unstructured] = None


@dataclass
class MachineDeploymentBlueprint:
    bootstrap_template: Unstructured
    infrastructure_machine_template: Unstructured
    metadata: ObjectMeta = field(default_factory=ObjectMeta)


@dataclass
class Blueprint:
    """
    Entrada de classe do compilador.

    Agrega o ClusterClass, a Topology da instância e todos os templates já
    resolvidos. `machine_deployments` é indexado pelo nome da classe de
    MachineDeployment.
    """

    cluster_class: ClusterClass
    topology: Topology
    infrastructure_cluster_template: Unstructured
    control_plane: ControlPlaneBlueprint
    machine_deployments: Dict[str, MachineDeploymentBlueprint] = field(default_factory=dict)

    def has_control_plane_infrastructure_machine(self) -> bool:
        return self.cluster_class.control_plane.machine_infrastructure_ref is not None

    def has_machine_deployments(self) -> bool:
        return bool(self.topology.machine_deployments)

    def to_dict(self) -> Dict[str, Any]:
        control_plane: Dict[str, Any] = {"template": self.control_plane.template.to_dict()}
        if self.control_plane.infrastructure_machine_template is not None:
            control_plane["infrastructureMachineTemplate"] = (
                self.control_plane.infrastructure_machine_template.to_dict()
            )
        return {
            "clusterClass": self.cluster_class.to_dict(),
            "topology": self.topology.to_dict(),
            "infrastructureClusterTemplate": self.infrastructure_cluster_template.to_dict(),
            "controlPlane": control_plane,
            "machineDeployments": {
                name: {
                    "metadata": md.metadata.to_dict(),
                    "bootstrapTemplate": md.bootstrap_template.to_dict(),
                    "infrastructureMachineTemplate": md.infrastructure_machine_template.to_dict(),
                }
                for name, md in sorted(self.machine_deployments.items())
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Blueprint":
        cp = data.get("controlPlane") or {}
        return cls(
            cluster_class=ClusterClass.from_dict(data.get("clusterClass") or {}),
            topology=Topology.from_dict(data.get("topology") or {}),
            infrastructure_cluster_template=Unstructured(
                object=copy.deepcopy(data.get("infrastructureClusterTemplate") or {})
            ),
            control_plane=ControlPlaneBlueprint(
                template=Unstructured(object=copy.deepcopy(cp.get("template") or {})),
                infrastructure_machine_template=Unstructured.from_dict(
                    cp.get("infrastructureMachineTemplate")
                ),
            ),
            machine_deployments={
                str(name): MachineDeploymentBlueprint(
                    metadata=ObjectMeta.from_dict(md.get("metadata")),
                    bootstrap_template=Unstructured(object=copy.deepcopy(md.get("bootstrapTemplate") or {})),
                    infrastructure_machine_template=Unstructured(
                        object=copy.deepcopy(md.get("infrastructureMachineTemplate") or {})
                    ),
                )
                for name, md in (data.get("machineDeployments") or {}).items()
            },
        )
