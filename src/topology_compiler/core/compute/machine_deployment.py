"""
Cálculo do estado desejado de um worker group (MachineDeployment).

Para cada entrada de `topology.workers.machineDeployments`:

    1. resolve a classe no Blueprint
    2. clona o BootstrapTemplate e o InfrastructureMachineTemplate da classe
    3. monta o MachineDeployment apontando para os templates clonados

Identidade do worker group:
    - `topology.cluster.x-k8s.io/deployment-name` = nome da instância,
      aplicado aos templates, ao objeto e ao template de máquina embutido
    - nomes reaproveitados do MachineDeployment corrente de mesmo nome
"""

from __future__ import annotations

from typing import Optional

from topology_compiler.core.constants import (
    CLUSTER_TOPOLOGY_MACHINE_DEPLOYMENT_LABEL_NAME,
    topology_labels,
)
from topology_compiler.core.contract import obj_to_ref
from topology_compiler.core.errors import unknown_machine_deployment_class
from topology_compiler.core.exceptions import UnknownMachineDeploymentClassError
from topology_compiler.core.model.blueprint import Blueprint, MachineDeploymentTopology
from topology_compiler.core.model.objects import (
    MachineDeployment,
    MachineDeploymentSpec,
    MachineSpec,
    MachineTemplateSpec,
    ObjectMeta,
    Unstructured,
)
from topology_compiler.core.model.references import ObjectReference
from topology_compiler.core.model.state import CurrentState, MachineDeploymentState
from topology_compiler.core.naming import (
    NameGenerator,
    bootstrap_template_name_prefix,
    infrastructure_machine_template_name_prefix,
    machine_deployment_name_prefix,
)
from topology_compiler.core.templates.cloner import TemplateToInput, template_to_template

from .metadata import merge_map


def _deployment_labels(cluster_name: str, deployment_name: str):
    labels = topology_labels(cluster_name)
    labels[CLUSTER_TOPOLOGY_MACHINE_DEPLOYMENT_LABEL_NAME] = deployment_name
    return labels


def _stamp_deployment_name(template: Unstructured, deployment_name: str) -> None:
    labels = template.get_labels()
    labels[CLUSTER_TOPOLOGY_MACHINE_DEPLOYMENT_LABEL_NAME] = deployment_name
    template.set_labels(labels)


def compute_machine_deployment(
    blueprint: Blueprint,
    current: CurrentState,
    md_topology: MachineDeploymentTopology,
    *,
    name_generator: NameGenerator,
) -> MachineDeploymentState:
    """
    Calcula o MachineDeploymentState de uma entrada da Topology.

    Raises:
        UnknownMachineDeploymentClassError: se a classe não existe no Blueprint.
    """
    class_name = md_topology.class_name
    md_blueprint = blueprint.machine_deployments.get(class_name)
    if md_blueprint is None:
        raise UnknownMachineDeploymentClassError.from_payload(
            unknown_machine_deployment_class(
                class_name=class_name,
                cluster_class=blueprint.cluster_class.name,
            )
        )

    cluster = current.cluster
    current_md = current.machine_deployments.get(md_topology.name)
    current_obj = current_md.object if current_md is not None else None

    # ------------------------------------------------------------------
    # Bootstrap template
    # ------------------------------------------------------------------
    current_bootstrap_ref: Optional[ObjectReference] = None
    if current_md is not None and current_md.bootstrap_template is not None and current_obj is not None:
        current_bootstrap_ref = current_obj.spec.template.spec.bootstrap_config_ref

    bootstrap_template = template_to_template(
        TemplateToInput(
            template=md_blueprint.bootstrap_template,
            template_cloned_from_ref=obj_to_ref(md_blueprint.bootstrap_template),
            cluster=cluster,
            name_prefix=bootstrap_template_name_prefix(cluster.name, md_topology.name),
            current_object_ref=current_bootstrap_ref,
        ),
        name_generator=name_generator,
    )
    _stamp_deployment_name(bootstrap_template, md_topology.name)

    # ------------------------------------------------------------------
    # InfrastructureMachineTemplate
    # ------------------------------------------------------------------
    current_infra_ref: Optional[ObjectReference] = None
    if (
        current_md is not None
        and current_md.infrastructure_machine_template is not None
        and current_obj is not None
    ):
        current_infra_ref = current_obj.spec.template.spec.infrastructure_ref

    infrastructure_machine_template = template_to_template(
        TemplateToInput(
            template=md_blueprint.infrastructure_machine_template,
            template_cloned_from_ref=obj_to_ref(md_blueprint.infrastructure_machine_template),
            cluster=cluster,
            name_prefix=infrastructure_machine_template_name_prefix(cluster.name, md_topology.name),
            current_object_ref=current_infra_ref,
        ),
        name_generator=name_generator,
    )
    _stamp_deployment_name(infrastructure_machine_template, md_topology.name)

    # ------------------------------------------------------------------
    # MachineDeployment
    # ------------------------------------------------------------------
    if current_obj is not None and current_obj.name:
        name = current_obj.name
    else:
        name = name_generator.generate_name(machine_deployment_name_prefix(cluster.name, md_topology.name))

    template_labels = merge_map(md_topology.metadata.labels, md_blueprint.metadata.labels)
    template_labels.update(_deployment_labels(cluster.name, md_topology.name))

    obj = MachineDeployment(
        name=name,
        namespace=cluster.namespace,
        labels=_deployment_labels(cluster.name, md_topology.name),
        spec=MachineDeploymentSpec(
            cluster_name=cluster.name,
            replicas=md_topology.replicas,
            template=MachineTemplateSpec(
                metadata=ObjectMeta(
                    labels=template_labels,
                    annotations=merge_map(md_topology.metadata.annotations, md_blueprint.metadata.annotations),
                ),
                spec=MachineSpec(
                    cluster_name=cluster.name,
                    version=blueprint.topology.version,
                    bootstrap_config_ref=obj_to_ref(bootstrap_template),
                    infrastructure_ref=obj_to_ref(infrastructure_machine_template),
                ),
            ),
        ),
    )

    return MachineDeploymentState(
        object=obj,
        bootstrap_template=bootstrap_template,
        infrastructure_machine_template=infrastructure_machine_template,
    )
