# src/topology_compiler/core/pipeline/step.py
"""
Contrato canônico de Step.

Um Step calcula exatamente um componente do Desired State a partir do
`RunContext` e publica o resultado como artifact.

Invariantes:
    - Cada Step possui um `id` único no passe
    - Cada Step declara explicitamente suas dependências
    - `run` é chamado no máximo uma vez por passe

Limites explícitos:
    - Steps não conhecem o Engine nem o planner
    - Steps não capturam as próprias exceções: o Engine registra a falha
"""

from __future__ import annotations

from typing import List, Protocol, runtime_checkable

from .context import RunContext
from .types import StepKind, StepResult


@runtime_checkable
class Step(Protocol):
    """
    Contrato mínimo de um Step executável pelo Engine.

    Atributos obrigatórios:
        - id: identificador único e estável (ex.: "machine_deployment.md1")
        - kind: papel semântico (`StepKind`)
        - depends_on: ids dos Steps que precisam rodar antes
    """
    id: str
    kind: StepKind
    depends_on: List[str]

    def run(self, ctx: RunContext) -> StepResult:
        """Calcula o componente usando exclusivamente o RunContext."""
        ...
