"""
Engine do Topology Compiler.

Componentes:
    - planner → ordenação topológica determinística e validações estruturais
    - engine  → execução fail-fast dos Steps com registro no Event Log e no
      Manifest

Invariantes:
    - Steps só são executados após suas dependências
    - Cada Step é executado no máximo uma vez por passe
"""

from .engine import Engine, InvalidStepResultError, RunResult  # noqa: F401
from .planner import CycleDetectedError, UnknownDependencyError, plan_execution  # noqa: F401
