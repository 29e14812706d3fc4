# src/topology_compiler/core/engine/planner.py
"""
Planejador de execução do passe (DAG).

Valida a estrutura dos Steps declarados e produz uma ordem topológica
determinística:

    - ids válidos e únicos
    - dependências existentes
    - ausência de ciclos

Decisões arquiteturais:
    - Ordenação topológica de Kahn
    - Empates são resolvidos pela ordem de declaração dos Steps, de forma
      que worker groups independentes sigam a ordem da Topology

Invariantes:
    - Nenhum Step aparece antes de suas dependências
    - Todos os Steps aparecem exatamente uma vez
    - A mesma definição produz sempre a mesma ordem
"""

from __future__ import annotations

from typing import Dict, Iterable, List

from topology_compiler.core.pipeline.registry import DuplicateStepIdError
from topology_compiler.core.pipeline.step import Step


class UnknownDependencyError(ValueError):
    """Um Step declarou em `depends_on` um id que não existe no passe."""


class CycleDetectedError(ValueError):
    """O grafo de dependências não é acíclico."""


def plan_execution(steps: Iterable[Step]) -> List[Step]:
    """
    Valida e ordena os Steps do passe.

    Sempre que mais de um Step está pronto, o primeiro declarado executa
    antes.

    Raises:
        ValueError: se algum Step possuir `id` vazio.
        DuplicateStepIdError: se dois Steps compartilharem o mesmo `id`.
        UnknownDependencyError: se um Step declarar dependência inexistente.
        CycleDetectedError: se houver ciclo no grafo.
    """
    step_list = list(steps)
    by_id: Dict[str, Step] = {}
    position: Dict[str, int] = {}
    for idx, s in enumerate(step_list):
        sid = getattr(s, "id", None)
        if not isinstance(sid, str) or not sid.strip():
            raise ValueError("step.id must be a non-empty string")
        if sid in by_id:
            raise DuplicateStepIdError(f"Duplicate step id: {sid}")
        by_id[sid] = s
        position[sid] = idx

    deps: Dict[str, List[str]] = {}
    for sid, s in by_id.items():
        d = list(getattr(s, "depends_on", []) or [])
        for dep in d:
            if dep not in by_id:
                raise UnknownDependencyError(f"Step '{sid}' depends on unknown step '{dep}'")
        deps[sid] = d

    incoming_count: Dict[str, int] = {sid: len(d) for sid, d in deps.items()}
    outgoing: Dict[str, List[str]] = {sid: [] for sid in by_id}
    for sid, dlist in deps.items():
        for dep in dlist:
            outgoing[dep].append(sid)

    ready: List[str] = sorted((sid for sid, c in incoming_count.items() if c == 0), key=position.__getitem__)
    order_ids: List[str] = []

    while ready:
        sid = ready.pop(0)
        order_ids.append(sid)
        for child in outgoing[sid]:
            incoming_count[child] -= 1
            if incoming_count[child] == 0:
                ready.append(child)
        ready.sort(key=position.__getitem__)

    if len(order_ids) != len(by_id):
        raise CycleDetectedError("Cycle detected in step dependency graph")

    return [by_id[sid] for sid in order_ids]
