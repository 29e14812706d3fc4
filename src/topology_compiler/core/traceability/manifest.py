# src/topology_compiler/core/traceability/manifest.py
"""
Compile Manifest v1: rastreabilidade de passes de compilação.

O Manifest consolida, de forma determinística e auditável:
    - metadados do passe (run_id, started_at, compiler_version)
    - hashes semânticos das entradas (config, Blueprint e Current State)
    - estado incremental de cada Step
    - Event Log ordenado de eventos explícitos
    - objetos do Desired State calculado, indexados por papel

Princípios fundamentais:
    - Nenhum evento é emitido implicitamente
    - Toda mutação ocorre por chamadas explícitas da API
    - A ordem do Event Log reflete a ordem real de execução
    - O Manifest é serializável e reconstruível (round-trip JSON)

Decisões arquiteturais:
    - UTC é o timezone canônico para todos os timestamps
    - As funções aceitam o Manifest como objeto ou como dict serializado;
      no segundo caso o dict é atualizado in-place

Limites explícitos:
    - Não executa o passe
    - Não decide políticas de execução (fail-fast)
    - Não realiza migração de versões de schema
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union


def _ensure_tzaware_utc(dt: datetime) -> datetime:
    """Timestamps sem timezone são assumidos como UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _iso(dt: datetime) -> str:
    return _ensure_tzaware_utc(dt).isoformat()


def _ms_between(start: datetime, end: datetime) -> int:
    """Duração em milissegundos, nunca negativa."""
    s = _ensure_tzaware_utc(start)
    e = _ensure_tzaware_utc(end)
    return max(0, int((e - s).total_seconds() * 1000))


@dataclass
class CompileManifest:
    """
    Registro de um passe de compilação.

    Campos principais:
        - run: metadados do passe (run_id, started_at, compiler_version)
        - inputs: hashes de config, Blueprint e Current State
        - steps: estado incremental de cada Step, indexado por step_id
        - events: Event Log ordenado
        - outputs: objetos calculados por papel (`cluster`,
          `control_plane`, `machine_deployment.<nome>`, ...), cada um com
          apiVersion, kind, name e namespace

    Invariantes:
        - `steps` é sempre um dicionário indexado por step_id
        - `events` é sempre uma lista ordenada
        - A estrutura completa é serializável em JSON
    """

    run: Dict[str, Any]
    inputs: Dict[str, Any]
    steps: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    events: List[Dict[str, Any]] = field(default_factory=list)
    outputs: Dict[str, Dict[str, str]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Cópia serializável e independente do estado interno."""
        return {
            "run": dict(self.run),
            "inputs": dict(self.inputs),
            "steps": {k: dict(v) for k, v in self.steps.items()},
            "events": [dict(e) for e in self.events],
            "outputs": {k: dict(v) for k, v in self.outputs.items()},
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CompileManifest":
        return cls(
            run=dict(data.get("run", {})),
            inputs=dict(data.get("inputs", {})),
            steps={k: dict(v) for k, v in (data.get("steps", {}) or {}).items()},
            events=[dict(e) for e in (data.get("events", []) or [])],
            outputs={k: dict(v) for k, v in (data.get("outputs", {}) or {}).items()},
        )


def create_manifest(
    *,
    run_id: str,
    started_at: datetime,
    compiler_version: str,
    config_hash: str,
    blueprint_hash: str,
    current_state_hash: str,
) -> CompileManifest:
    """
    Cria o Manifest inicial de um passe.

    ⚠️ Importante: esta função **não emite eventos implicitamente**. O Event
    Log inicia vazio e só é preenchido por `add_event`, `step_started`,
    `step_finished` ou `step_failed`.

    Args:
        run_id: identificador único do passe.
        started_at: timestamp de início (normalizado para UTC).
        compiler_version: versão do Topology Compiler.
        config_hash: hash da configuração resolvida.
        blueprint_hash: hash do Blueprint compilado.
        current_state_hash: hash do Current State observado.
    """
    started_at = _ensure_tzaware_utc(started_at)

    return CompileManifest(
        run={
            "run_id": run_id,
            "started_at": _iso(started_at),
            "compiler_version": compiler_version,
        },
        inputs={
            "config_hash": config_hash,
            "blueprint_hash": blueprint_hash,
            "current_state_hash": current_state_hash,
        },
        steps={},
        events=[],
    )


def _get_manifest(manifest: Union[CompileManifest, Dict[str, Any]]) -> Tuple[CompileManifest, bool]:
    if isinstance(manifest, CompileManifest):
        return manifest, False
    return CompileManifest.from_dict(manifest), True


def _sync(manifest: Union[CompileManifest, Dict[str, Any]], m: CompileManifest, is_dict: bool) -> None:
    if is_dict:
        manifest.clear()  # type: ignore[union-attr]
        manifest.update(m.to_dict())  # type: ignore[union-attr]


def add_event(
    manifest: Union[CompileManifest, Dict[str, Any]],
    *,
    event_type: str,
    ts: datetime,
    step_id: Optional[str] = None,
    payload: Optional[Dict[str, Any]] = None,
) -> None:
    """
    Adiciona um evento explícito ao Event Log.

    Cada chamada adiciona exatamente um evento; eventos nunca são
    reordenados ou deduplicados.
    """
    ts = _ensure_tzaware_utc(ts)
    m, is_dict = _get_manifest(manifest)

    ev: Dict[str, Any] = {"event_type": event_type, "timestamp": _iso(ts)}
    if step_id is not None:
        ev["step_id"] = step_id
    if payload is not None:
        ev["payload"] = payload

    m.events.append(ev)
    _sync(manifest, m, is_dict)


def step_started(
    manifest: Union[CompileManifest, Dict[str, Any]],
    *,
    step_id: str,
    kind: str,
    ts: datetime,
) -> None:
    """Marca o Step como `running` e registra `step_started`."""
    ts = _ensure_tzaware_utc(ts)
    m, is_dict = _get_manifest(manifest)

    m.steps.setdefault(step_id, {})
    m.steps[step_id].update(
        {
            "step_id": step_id,
            "kind": kind,
            "status": "running",
            "started_at": _iso(ts),
        }
    )

    add_event(m, event_type="step_started", ts=ts, step_id=step_id, payload={"kind": kind})
    _sync(manifest, m, is_dict)


def step_finished(
    manifest: Union[CompileManifest, Dict[str, Any]],
    *,
    step_id: str,
    ts: datetime,
    result: Dict[str, Any],
) -> None:
    """
    Registra a conclusão de um Step.

    `result` segue o formato de `StepResult` (status, summary, warnings,
    artifacts). A duração é calculada a partir de `started_at` quando
    disponível.
    """
    ts = _ensure_tzaware_utc(ts)
    m, is_dict = _get_manifest(manifest)

    s = m.steps.setdefault(step_id, {"step_id": step_id})
    started_iso = s.get("started_at")
    started_dt = datetime.fromisoformat(started_iso) if started_iso else ts

    status = result.get("status", "success")
    s.update(
        {
            "status": status,
            "finished_at": _iso(ts),
            "duration_ms": _ms_between(started_dt, ts),
            "summary": result.get("summary"),
            "warnings": result.get("warnings", []) or [],
            "artifacts": result.get("artifacts", {}) or {},
        }
    )

    add_event(
        m,
        event_type="step_finished",
        ts=ts,
        step_id=step_id,
        payload={"status": status, "duration_ms": s.get("duration_ms", 0)},
    )
    _sync(manifest, m, is_dict)


def step_failed(
    manifest: Union[CompileManifest, Dict[str, Any]],
    *,
    step_id: str,
    ts: datetime,
    error: Dict[str, Any],
) -> None:
    """
    Registra a falha de um Step.

    `error` é o payload canônico serializado (`TopologyErrorPayload.to_dict()`).
    """
    ts = _ensure_tzaware_utc(ts)
    m, is_dict = _get_manifest(manifest)

    s = m.steps.setdefault(step_id, {"step_id": step_id})
    s.update(
        {
            "status": "failed",
            "finished_at": _iso(ts),
            "error": dict(error),
        }
    )

    add_event(m, event_type="step_failed", ts=ts, step_id=step_id, payload={"error": dict(error)})
    _sync(manifest, m, is_dict)


def record_outputs(
    manifest: Union[CompileManifest, Dict[str, Any]],
    *,
    outputs: Dict[str, Dict[str, str]],
    ts: datetime,
) -> None:
    """
    Registra os objetos do Desired State calculado e emite
    `desired_state_computed`.

    `outputs` substitui qualquer registro anterior; o payload do evento traz
    os papéis na ordem recebida.
    """
    ts = _ensure_tzaware_utc(ts)
    m, is_dict = _get_manifest(manifest)

    m.outputs = {role: dict(obj) for role, obj in outputs.items()}
    m.run["finished_at"] = _iso(ts)

    add_event(m, event_type="desired_state_computed", ts=ts, payload={"roles": list(m.outputs)})
    _sync(manifest, m, is_dict)


def save_manifest(manifest: Union[CompileManifest, Dict[str, Any]], path: Path) -> None:
    """
    Persiste o Manifest em JSON determinístico (`sort_keys=True`).

    Diretórios intermediários são criados automaticamente.
    """
    data = manifest.to_dict() if isinstance(manifest, CompileManifest) else manifest
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, ensure_ascii=False, indent=2, sort_keys=True), encoding="utf-8")


def load_manifest(path: Path) -> CompileManifest:
    """Restaura um Manifest salvo por `save_manifest` (propaga erros de I/O e JSON)."""
    data = json.loads(path.read_text(encoding="utf-8"))
    return CompileManifest.from_dict(data)
