# src/topology_compiler/core/pipeline/types.py
"""
Tipos canônicos do passe de compilação.

Este módulo define as estruturas e enums que padronizam a comunicação
entre Steps, Engine e a camada de rastreabilidade:

    - StepKind   → papel do Step no grafo de objetos calculado
    - StepStatus → estado final de execução (SUCCESS, SKIPPED, FAILED)
    - StepResult → resultado imutável produzido por um Step

Invariantes:
    - Enums possuem valores textuais canônicos (serializáveis em JSON)
    - StepResult é imutável
    - Nenhuma lógica de execução vive neste módulo
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List


class StepKind(str, Enum):
    """
    Papel de um Step no Desired State.

    O valor é informativo: o Engine não decide execução com base no `kind`,
    ele só é propagado para eventos e Manifest.

    Tipos definidos:
        - INFRASTRUCTURE: InfrastructureCluster
        - CONTROL_PLANE: ControlPlane e seu InfrastructureMachineTemplate
        - CLUSTER: Cluster
        - WORKERS: um MachineDeployment (worker group)
    """
    INFRASTRUCTURE = "infrastructure"
    CONTROL_PLANE = "control_plane"
    CLUSTER = "cluster"
    WORKERS = "workers"


class StepStatus(str, Enum):
    """
    Estados finais possíveis da execução de um Step.

    - SUCCESS: componente calculado
    - SKIPPED: não executado (dependência falhou)
    - FAILED: execução interrompida por erro
    """
    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class StepResult:
    """
    Resultado imutável da execução de um Step.

    Campos:
        - step_id: identificador único do Step
        - kind: papel do Step (`StepKind`)
        - status: estado final da execução
        - summary: resumo textual (ex.: nome do objeto calculado)
        - warnings: avisos não fatais
        - artifacts: chaves do RunContext produzidas pelo Step, mapeadas
          para uma descrição curta (ex.: "DockerCluster/c1-abcde")
        - payload: dados adicionais (ex.: `error` em caso de falha)

    Limites explícitos:
        - Não carrega os objetos calculados (eles vivem no RunContext)
        - Não registra eventos
    """
    step_id: str
    kind: StepKind
    status: StepStatus
    summary: str
    warnings: List[str] = field(default_factory=list)
    artifacts: Dict[str, str] = field(default_factory=dict)
    payload: Dict[str, Any] = field(default_factory=dict)
