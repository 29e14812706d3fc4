"""
Cálculo do ControlPlane desejado e do seu InfrastructureMachineTemplate.

O objeto ControlPlane pertence a um provedor externo; os campos que o
compilador escreve passam sempre pelo contrato (`core.contract`):

    - spec.machineTemplate.infrastructureRef (somente se a classe exige
      máquinas de infraestrutura)
    - spec.machineTemplate.metadata (idem)
    - spec.replicas (somente se a Topology declara réplicas)
    - spec.version

Qualquer falha de acesso aborta o cálculo com `FieldAccessError` nomeando o
caminho do campo.
"""

from __future__ import annotations

from typing import Optional

from topology_compiler.core.constants import topology_labels
from topology_compiler.core.contract import control_plane
from topology_compiler.core.errors import field_access_failed
from topology_compiler.core.exceptions import FieldAccessError, TopologyException
from topology_compiler.core.model.blueprint import Blueprint
from topology_compiler.core.model.objects import ObjectMeta, Unstructured
from topology_compiler.core.model.references import ObjectReference
from topology_compiler.core.model.state import CurrentState
from topology_compiler.core.naming import (
    NameGenerator,
    cluster_object_name_prefix,
    control_plane_infrastructure_machine_template_name_prefix,
)
from topology_compiler.core.templates.cloner import (
    TemplateToInput,
    template_to_object,
    template_to_template,
)
from topology_compiler.core.templates.generator import TemplateGenerator

from .metadata import merge_map


def compute_control_plane_infrastructure_machine_template(
    blueprint: Blueprint,
    current: CurrentState,
    *,
    name_generator: NameGenerator,
) -> Unstructured:
    """Clona o InfrastructureMachineTemplate usado pelas máquinas do control plane."""
    template = blueprint.control_plane.infrastructure_machine_template
    cloned_from = blueprint.cluster_class.control_plane.machine_infrastructure_ref
    if template is None or cloned_from is None:
        raise ValueError("the ClusterClass does not define a control plane infrastructure machine template")

    cluster = current.cluster

    # O nome corrente só existe se o ControlPlane já foi criado.
    current_ref: Optional[ObjectReference] = None
    if current.control_plane is not None and current.control_plane.object is not None:
        try:
            current_ref = control_plane().machine_template().infrastructure_ref().get(
                current.control_plane.object
            )
        except TopologyException as e:
            raise e.wrap(
                "failed to get spec.machineTemplate.infrastructureRef for the current ControlPlane object"
            ) from e

    return template_to_template(
        TemplateToInput(
            template=template,
            template_cloned_from_ref=cloned_from,
            cluster=cluster,
            name_prefix=control_plane_infrastructure_machine_template_name_prefix(cluster.name),
            current_object_ref=current_ref,
        ),
        name_generator=name_generator,
    )


def _set_failed(e: Exception, *, path: str, obj: Unstructured) -> FieldAccessError:
    """Normaliza uma falha de escrita do contrato com o caminho do campo."""
    if isinstance(e, TopologyException):
        return e.wrap(f"failed to set {path} in the ControlPlane object", path=path)
    return FieldAccessError.from_payload(
        field_access_failed(
            path=path,
            object_kind=obj.kind or "ControlPlane",
            operation="set",
            reason=str(e),
        )
    )


def compute_control_plane(
    blueprint: Blueprint,
    current: CurrentState,
    infrastructure_machine_template: Optional[Unstructured],
    *,
    generator: TemplateGenerator,
    name_generator: NameGenerator,
) -> Unstructured:
    """
    Gera o ControlPlane a partir do template da classe.

    Args:
        infrastructure_machine_template: template calculado por
            `compute_control_plane_infrastructure_machine_template`; exigido
            apenas quando a classe declara máquinas de infraestrutura.

    Raises:
        TemplateGenerationError: se o gerador rejeitar o template.
        FieldAccessError: se algum campo do contrato não puder ser escrito.
    """
    template = blueprint.control_plane.template
    cluster = current.cluster
    topology = blueprint.topology

    try:
        obj = template_to_object(
            TemplateToInput(
                template=template,
                template_cloned_from_ref=blueprint.cluster_class.control_plane.ref,
                cluster=cluster,
                name_prefix=cluster_object_name_prefix(cluster.name),
                current_object_ref=cluster.spec.control_plane_ref,
            ),
            generator=generator,
            name_generator=name_generator,
        )
    except TopologyException as e:
        raise e.wrap(f"failed to generate the ControlPlane object from the {template.kind}") from e

    contract = control_plane()

    if blueprint.has_control_plane_infrastructure_machine():
        try:
            contract.machine_template().infrastructure_ref().set(obj, infrastructure_machine_template)
        except (TopologyException, ValueError) as e:
            raise _set_failed(e, path="spec.machineTemplate.infrastructureRef", obj=obj) from e

        topology_metadata = topology.control_plane.metadata
        class_metadata = blueprint.cluster_class.control_plane.metadata

        machine_labels = merge_map(topology_metadata.labels, class_metadata.labels)
        machine_labels.update(topology_labels(cluster.name))
        try:
            contract.machine_template().metadata().set(
                obj,
                ObjectMeta(
                    labels=machine_labels,
                    annotations=merge_map(topology_metadata.annotations, class_metadata.annotations),
                ),
            )
        except TopologyException as e:
            raise _set_failed(e, path="spec.machineTemplate.metadata", obj=obj) from e

    # Sem réplicas na Topology, o campo fica a cargo do provedor.
    if topology.control_plane.replicas is not None:
        try:
            contract.replicas().set(obj, topology.control_plane.replicas)
        except TopologyException as e:
            raise _set_failed(e, path="spec.replicas", obj=obj) from e

    try:
        contract.version().set(obj, topology.version)
    except TopologyException as e:
        raise _set_failed(e, path="spec.version", obj=obj) from e

    return obj
