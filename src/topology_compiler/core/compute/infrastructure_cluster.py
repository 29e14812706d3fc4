"""Cálculo do InfrastructureCluster desejado."""

from __future__ import annotations

from topology_compiler.core.exceptions import TopologyException
from topology_compiler.core.model.blueprint import Blueprint
from topology_compiler.core.model.objects import Unstructured
from topology_compiler.core.model.state import CurrentState
from topology_compiler.core.naming import NameGenerator, cluster_object_name_prefix
from topology_compiler.core.templates.cloner import TemplateToInput, template_to_object
from topology_compiler.core.templates.generator import TemplateGenerator


def compute_infrastructure_cluster(
    blueprint: Blueprint,
    current: CurrentState,
    *,
    generator: TemplateGenerator,
    name_generator: NameGenerator,
) -> Unstructured:
    """
    Gera o InfrastructureCluster a partir do template da classe.

    O nome é reaproveitado de `cluster.spec.infrastructureRef` quando o
    Cluster corrente já referencia um objeto.
    """
    template = blueprint.infrastructure_cluster_template
    cluster = current.cluster

    try:
        return template_to_object(
            TemplateToInput(
                template=template,
                template_cloned_from_ref=blueprint.cluster_class.infrastructure_ref,
                cluster=cluster,
                name_prefix=cluster_object_name_prefix(cluster.name),
                current_object_ref=cluster.spec.infrastructure_ref,
            ),
            generator=generator,
            name_generator=name_generator,
        )
    except TopologyException as e:
        raise e.wrap(
            f"failed to generate the InfrastructureCluster object from the {template.kind}"
        ) from e
