"""Construção de referências a partir de objetos finalizados."""

from __future__ import annotations

from typing import Any

from topology_compiler.core.model.references import ObjectReference


def obj_to_ref(obj: Any) -> ObjectReference:
    """
    Retorna a `ObjectReference` (apiVersion/kind/name/namespace) de `obj`.

    Aceita `Unstructured` e os objetos tipados (`Cluster`, `MachineDeployment`),
    que expõem os mesmos atributos.
    """
    if obj is None:
        raise ValueError("cannot build a reference to a nil object")
    return ObjectReference(
        api_version=obj.api_version,
        kind=obj.kind,
        name=obj.name,
        namespace=obj.namespace,
    )
