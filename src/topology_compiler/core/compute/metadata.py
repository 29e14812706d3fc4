"""Fusão de mapas de labels/anotações."""

from __future__ import annotations

from typing import Dict, Optional


def merge_map(primary: Optional[Dict[str, str]], secondary: Optional[Dict[str, str]]) -> Dict[str, str]:
    """
    Une dois mapas em um novo dicionário.

    Em caso de chave repetida, o valor de `primary` prevalece. `None` é
    tratado como mapa vazio e nenhuma das entradas é mutada.

    Exemplo:
        merge_map({"a": "topology"}, {"a": "class", "b": "class"})
        -> {"a": "topology", "b": "class"}
    """
    out: Dict[str, str] = dict(secondary or {})
    out.update(primary or {})
    return out
