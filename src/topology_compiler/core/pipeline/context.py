# src/topology_compiler/core/pipeline/context.py
"""
Contexto de execução de um passe de compilação.

O `RunContext` é o único meio de troca de informação entre Steps:

    - entradas somente-leitura (Blueprint e Current State)
    - configuração resolvida
    - artifact store com os componentes já calculados
    - logs estruturados e warnings por Step
    - Manifest opcional atualizado pelo Engine

Invariantes:
    - Cada chamada de compilação possui seu próprio RunContext
    - Logs sempre incluem `run_id` e `step_id`
    - Warnings são agrupados por `step_id`

Limites explícitos:
    - Não executa Steps
    - Não persiste dados automaticamente
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from topology_compiler.core.model.blueprint import Blueprint
from topology_compiler.core.model.state import CurrentState
from topology_compiler.core.traceability.manifest import CompileManifest

_LEVELS = {"debug": 10, "info": 20, "warning": 30, "error": 40}


@dataclass
class RunContext:
    """
    Contexto canônico passado a todos os Steps de um passe.

    Steps leem `blueprint` e `current` (nunca os mutam) e publicam seus
    resultados via `set_artifact`; Steps posteriores os leem via
    `get_artifact`.
    """
    run_id: str
    created_at: datetime
    blueprint: Blueprint
    current: CurrentState
    config: Dict[str, Any] = field(default_factory=dict)
    meta: Dict[str, Any] = field(default_factory=dict)
    manifest: Optional[CompileManifest] = None

    _artifacts: Dict[str, Any] = field(default_factory=dict, init=False, repr=False)
    events: List[Dict[str, Any]] = field(default_factory=list, init=False)
    warnings: Dict[str, List[str]] = field(default_factory=dict, init=False)

    # -----------------------------
    # Artifact store
    # -----------------------------
    def set_artifact(self, key: str, value: Any) -> None:
        self._artifacts[key] = value

    def has_artifact(self, key: str) -> bool:
        return key in self._artifacts

    def get_artifact(self, key: str) -> Any:
        if key not in self._artifacts:
            raise KeyError(key)
        return self._artifacts[key]

    # -----------------------------
    # Logging & warnings
    # -----------------------------
    def _min_level(self) -> int:
        engine_cfg = (self.config or {}).get("engine", {}) or {}
        return _LEVELS.get(str(engine_cfg.get("log_level", "debug")).lower(), 10)

    def log(self, *, step_id: str, level: str, message: str, **extra: Any) -> None:
        # eventos abaixo de engine.log_level são descartados
        if _LEVELS.get(level, 20) < self._min_level():
            return
        event = {
            "run_id": self.run_id,
            "step_id": step_id,
            "level": level,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        event.update(extra)
        self.events.append(event)

    def add_warning(self, *, step_id: str, message: str) -> None:
        self.warnings.setdefault(step_id, []).append(message)
        self.log(step_id=step_id, level="warning", message=message)
