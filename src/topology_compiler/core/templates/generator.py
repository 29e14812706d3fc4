"""
Colaborador de geração de objetos a partir de templates.

Um template de provedor tem a forma:

    apiVersion: infrastructure.cluster.x-k8s.io/v1alpha4
    kind: DockerClusterTemplate
    metadata: {name: ..., namespace: ...}
    spec:
      template:
        metadata: {labels: ..., annotations: ...}
        spec: {...}

`SpecTemplateGenerator` materializa `spec.template` como um objeto concreto
(`DockerCluster`), no namespace do cluster, com labels de identidade e
anotações de proveniência.
"""

from __future__ import annotations

import copy
from typing import Dict, Optional, Protocol, runtime_checkable

from topology_compiler.core.constants import (
    CLUSTER_LABEL_NAME,
    TEMPLATE_CLONED_FROM_GROUP_KIND_ANNOTATION,
    TEMPLATE_CLONED_FROM_NAME_ANNOTATION,
    TEMPLATE_SUFFIX,
)
from topology_compiler.core.exceptions import TemplateGenerationError
from topology_compiler.core.model.objects import Unstructured
from topology_compiler.core.model.references import ObjectReference
from topology_compiler.core.naming import NameGenerator, SimpleNameGenerator


@runtime_checkable
class TemplateGenerator(Protocol):
    """Contrato do colaborador externo de geração."""

    def generate(
        self,
        *,
        template: Unstructured,
        template_ref: ObjectReference,
        namespace: str,
        labels: Dict[str, str],
        cluster_name: str,
    ) -> Unstructured:
        ...


class SpecTemplateGenerator:
    """Implementação padrão: instancia `spec.template` do template."""

    def __init__(self, *, name_generator: Optional[NameGenerator] = None):
        self.name_generator = name_generator or SimpleNameGenerator()

    def generate(
        self,
        *,
        template: Unstructured,
        template_ref: ObjectReference,
        namespace: str,
        labels: Dict[str, str],
        cluster_name: str,
    ) -> Unstructured:
        spec = template.object.get("spec")
        body = spec.get("template") if isinstance(spec, dict) else None
        if body is None:
            raise TemplateGenerationError(
                message=f"missing spec.template on {template.api_version}, Kind={template.kind} {template.name!r}",
                details={"template_kind": template.kind, "template_name": template.name},
            )
        if not isinstance(body, dict):
            raise TemplateGenerationError(
                message=f"spec.template on {template.kind} {template.name!r} must be a map",
                details={"template_kind": template.kind, "template_name": template.name},
            )

        to = Unstructured(object=copy.deepcopy(body))
        to.resource_version = ""
        to.finalizers = None
        to.uid = ""
        to.self_link = ""
        to.name = self.name_generator.generate_name(f"{template.name}-")
        to.namespace = namespace

        annotations = to.get_annotations()
        annotations[TEMPLATE_CLONED_FROM_NAME_ANNOTATION] = template_ref.name
        annotations[TEMPLATE_CLONED_FROM_GROUP_KIND_ANNOTATION] = template_ref.group_kind()
        to.set_annotations(annotations)

        obj_labels = to.get_labels()
        obj_labels.update(labels)
        obj_labels[CLUSTER_LABEL_NAME] = cluster_name
        to.set_labels(obj_labels)

        to.api_version = template.api_version
        kind = template.kind
        if kind.endswith(TEMPLATE_SUFFIX):
            kind = kind[: -len(TEMPLATE_SUFFIX)]
        to.kind = kind

        return to
