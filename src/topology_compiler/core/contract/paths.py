"""Leitura e escrita de campos aninhados em objetos `Unstructured`.

Um caminho é uma tupla de chaves (ex.: `("spec", "machineTemplate", "metadata")`).
Falhas estruturais (um nível intermediário que não é mapa) viram
`FieldAccessError` nomeando o caminho.
"""

from __future__ import annotations

import copy
from typing import Any, Sequence, Tuple

from topology_compiler.core.exceptions import FieldAccessError
from topology_compiler.core.model.objects import Unstructured


def path_to_str(path: Sequence[str]) -> str:
    return ".".join(path)


def get_nested(obj: Unstructured, path: Sequence[str]) -> Tuple[Any, bool]:
    """Retorna `(valor, encontrado)`; nunca cria níveis intermediários."""
    current: Any = obj.object
    for depth, key in enumerate(path):
        if not isinstance(current, dict):
            raise FieldAccessError(
                message=(
                    f"{path_to_str(path)} accessor error: {path_to_str(path[:depth])} "
                    f"is of type {type(current).__name__}, expected map"
                ),
                details={"path": path_to_str(path), "object_kind": obj.kind},
            )
        if key not in current:
            return None, False
        current = current[key]
    return copy.deepcopy(current), True


def set_nested(obj: Unstructured, value: Any, path: Sequence[str]) -> None:
    """Escreve `value` em `path`, criando mapas intermediários ausentes."""
    if not path:
        raise ValueError("path must not be empty")

    current = obj.object
    for depth, key in enumerate(path[:-1]):
        nxt = current.get(key)
        if nxt is None:
            nxt = {}
            current[key] = nxt
        elif not isinstance(nxt, dict):
            raise FieldAccessError(
                message=(
                    f"value cannot be set because {path_to_str(path[: depth + 1])} "
                    f"is of type {type(nxt).__name__}, expected map"
                ),
                details={"path": path_to_str(path), "object_kind": obj.kind},
            )
        current = nxt
    current[path[-1]] = copy.deepcopy(value)
