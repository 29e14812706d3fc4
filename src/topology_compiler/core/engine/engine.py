# src/topology_compiler/core/engine/engine.py
"""
Engine de execução do passe de compilação.

O Engine planeja os Steps (planner) e os executa em ordem, sempre com a
mesma disciplina:

    - registra `step_started` / `step_finished` / `step_failed` no Event Log
      do RunContext e, quando presente, no Manifest
    - converte exceções em `TopologyErrorPayload` (serializável), guardado
      em `StepResult.payload["error"]`
    - preserva a exceção original em `RunResult.exceptions` para que o
      chamador possa relançá-la

Política de falha:
    - `engine.fail_fast` (padrão: true) interrompe o passe na primeira falha
    - sem fail-fast, Steps cujas dependências falharam são marcados SKIPPED

O Engine nunca monta um Desired State: ele só reporta o que cada Step fez.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

from topology_compiler.core.errors import (
    TopologyErrorPayload,
    engine_configuration_error,
    engine_execution_error,
)
from topology_compiler.core.exceptions import TopologyException
from topology_compiler.core.pipeline.context import RunContext
from topology_compiler.core.pipeline.step import Step
from topology_compiler.core.pipeline.types import StepResult, StepStatus
from topology_compiler.core.traceability.manifest import step_failed, step_finished, step_started

from .planner import plan_execution


class InvalidStepResultError(TypeError):
    """`Step.run(ctx)` retornou algo que não é `StepResult`."""


@dataclass(frozen=True)
class RunResult:
    """Resultado agregado de um passe."""

    steps: Dict[str, StepResult] = field(default_factory=dict)
    exceptions: Dict[str, Exception] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.exceptions

    def first_failure(self) -> Optional[str]:
        for sid in self.exceptions:
            return sid
        return None

    def raise_for_failure(self) -> None:
        """Relança a exceção do primeiro Step que falhou, se houver."""
        sid = self.first_failure()
        if sid is not None:
            raise self.exceptions[sid]


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _kind_value(step: Step) -> str:
    kind = getattr(step, "kind", None)
    return str(getattr(kind, "value", kind))


class Engine:
    """Planner + executor de um passe."""

    def __init__(self, *, steps: Sequence[Step], ctx: RunContext):
        self.steps: List[Step] = list(steps)
        self.ctx: RunContext = ctx

    def _fail_fast(self) -> bool:
        engine_cfg = (self.ctx.config or {}).get("engine", {}) or {}
        return bool(engine_cfg.get("fail_fast", True))

    # ------------------------------------------------------------------
    # exceção -> TopologyErrorPayload
    # ------------------------------------------------------------------
    def _exception_to_error(self, step_id: str, exc: Exception) -> TopologyErrorPayload:
        if isinstance(exc, TopologyException):
            payload = exc.to_payload()
            details = dict(payload.details)
            details["step"] = step_id
            return replace(payload, details=details)

        if isinstance(exc, InvalidStepResultError):
            return engine_configuration_error(
                message="Step retornou tipo inválido",
                details={"step": step_id, "expected": "StepResult", "received": str(exc)},
            )

        return engine_execution_error(
            step=step_id,
            exc_type=exc.__class__.__name__,
            exc_message=str(exc) or None,
        )

    # ------------------------------------------------------------------
    # Rastreabilidade
    # ------------------------------------------------------------------
    def _merge_ctx_warnings(self, result: StepResult) -> StepResult:
        merged: List[str] = []
        for msg in list(result.warnings) + list(self.ctx.warnings.get(result.step_id, [])):
            if msg not in merged:
                merged.append(msg)
        return replace(result, warnings=merged)

    def _record_finished(self, result: StepResult) -> None:
        self.ctx.log(
            step_id=result.step_id,
            level="info",
            message=f"step {result.status.value}: {result.summary}",
            status=result.status.value,
        )
        if self.ctx.manifest is not None:
            step_finished(
                self.ctx.manifest,
                step_id=result.step_id,
                ts=_now(),
                result={
                    "status": result.status.value,
                    "summary": result.summary,
                    "warnings": list(result.warnings),
                    "artifacts": dict(result.artifacts),
                },
            )

    def _record_failed(self, step_id: str, error: TopologyErrorPayload) -> None:
        self.ctx.log(step_id=step_id, level="error", message=error.message, error=error.to_dict())
        if self.ctx.manifest is not None:
            step_failed(self.ctx.manifest, step_id=step_id, ts=_now(), error=error.to_dict())

    # ------------------------------------------------------------------
    # Execução
    # ------------------------------------------------------------------
    def run(self) -> RunResult:
        ordered = plan_execution(self.steps)

        results: Dict[str, StepResult] = {}
        exceptions: Dict[str, Exception] = {}

        for step in ordered:
            sid = step.id

            deps = list(getattr(step, "depends_on", []) or [])
            if any(d in results and results[d].status != StepStatus.SUCCESS for d in deps):
                skipped = StepResult(
                    step_id=sid,
                    kind=step.kind,
                    status=StepStatus.SKIPPED,
                    summary="skipped due to failed dependency",
                )
                results[sid] = skipped
                self._record_finished(skipped)
                continue

            self.ctx.log(step_id=sid, level="info", message="step started", kind=_kind_value(step))
            if self.ctx.manifest is not None:
                step_started(self.ctx.manifest, step_id=sid, kind=_kind_value(step), ts=_now())

            try:
                step_result = step.run(self.ctx)
                if not isinstance(step_result, StepResult):
                    raise InvalidStepResultError(type(step_result).__name__)
            except Exception as e:
                error = self._exception_to_error(sid, e)
                results[sid] = StepResult(
                    step_id=sid,
                    kind=step.kind,
                    status=StepStatus.FAILED,
                    summary=error.message,
                    warnings=list(self.ctx.warnings.get(sid, [])),
                    payload={"error": error.to_dict()},
                )
                exceptions[sid] = e
                self._record_failed(sid, error)

                if self._fail_fast():
                    break
                continue

            enriched = self._merge_ctx_warnings(replace(step_result, step_id=sid))
            results[sid] = enriched
            self._record_finished(enriched)

        return RunResult(steps=results, exceptions=exceptions)
