"""
Clonagem de templates com nomes que preservam identidade.

Este módulo transforma templates compartilhados (por classe) em objetos
escopados a uma instância de cluster, de duas formas:

    - `template_to_object`: gera um objeto concreto via `TemplateGenerator`
      (ex.: DockerClusterTemplate → DockerCluster)
    - `template_to_template`: copia o template como um novo template da
      instância (ex.: o InfrastructureMachineTemplate referenciado pelo
      ControlPlane ou por um MachineDeployment)

Regra de nome (ambas as operações):
    - se existe uma referência corrente com nome não vazio, o nome é reusado
    - caso contrário, um nome novo é gerado a partir de `name_prefix`

Invariantes:
    - O template de entrada nunca é mutado
    - Todo resultado carrega os labels de identidade do cluster e de posse
    - Templates clonados não carregam resourceVersion, uid, finalizers nem
      selfLink da origem
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from topology_compiler.core.constants import (
    TEMPLATE_CLONED_FROM_GROUP_KIND_ANNOTATION,
    TEMPLATE_CLONED_FROM_NAME_ANNOTATION,
    topology_labels,
)
from topology_compiler.core.errors import template_generation_failed
from topology_compiler.core.exceptions import TemplateGenerationError
from topology_compiler.core.model.objects import Cluster, Unstructured
from topology_compiler.core.model.references import ObjectReference
from topology_compiler.core.naming import NameGenerator

from .generator import TemplateGenerator


@dataclass(frozen=True)
class TemplateToInput:
    template: Unstructured
    template_cloned_from_ref: ObjectReference
    cluster: Cluster
    name_prefix: str
    current_object_ref: Optional[ObjectReference] = None


def _assign_name(obj: Unstructured, in_: TemplateToInput, name_generator: NameGenerator) -> None:
    current = in_.current_object_ref
    if current is not None and current.name:
        obj.name = current.name
        return
    obj.name = name_generator.generate_name(in_.name_prefix)


def template_to_object(
    in_: TemplateToInput,
    *,
    generator: TemplateGenerator,
    name_generator: NameGenerator,
) -> Unstructured:
    """Gera um objeto a partir de um template (CloneAsObject).

    Raises:
        TemplateGenerationError: se o gerador falhar.
    """
    labels = topology_labels(in_.cluster.name)

    try:
        obj = generator.generate(
            template=in_.template,
            template_ref=in_.template_cloned_from_ref,
            namespace=in_.cluster.namespace,
            labels=labels,
            cluster_name=in_.cluster.name,
        )
    except Exception as e:
        payload = template_generation_failed(
            template_kind=in_.template.kind,
            template_name=in_.template.name,
            reason=str(e) or e.__class__.__name__,
        )
        raise TemplateGenerationError.from_payload(payload) from e

    _assign_name(obj, in_, name_generator)
    return obj


def template_to_template(
    in_: TemplateToInput,
    *,
    name_generator: NameGenerator,
) -> Unstructured:
    """Copia um template como template da instância (CloneAsTemplate). Nunca falha."""
    template = in_.template.deep_copy()

    template.resource_version = ""
    template.finalizers = None
    template.uid = ""
    template.self_link = ""

    labels = template.get_labels()
    labels.update(topology_labels(in_.cluster.name))
    template.set_labels(labels)

    annotations = template.get_annotations()
    annotations[TEMPLATE_CLONED_FROM_NAME_ANNOTATION] = in_.template_cloned_from_ref.name
    annotations[TEMPLATE_CLONED_FROM_GROUP_KIND_ANNOTATION] = in_.template_cloned_from_ref.group_kind()
    template.set_annotations(annotations)

    _assign_name(template, in_, name_generator)
    return template
