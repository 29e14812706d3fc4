# tests/core/traceability/test_manifest_step_updates.py
"""
Testes de atualização incremental de Steps no Manifest.

O Manifest pode ser passado como objeto ou como dict serializado; no
segundo caso o dict é atualizado in-place.
"""
from datetime import datetime, timezone

import pytest

from topology_compiler.core.traceability.manifest import (
    add_event,
    create_manifest,
    step_failed,
    step_finished,
    step_started,
)

T0 = datetime(2026, 1, 16, 12, 0, 0, tzinfo=timezone.utc)
T1 = datetime(2026, 1, 16, 12, 0, 1, 500000, tzinfo=timezone.utc)


@pytest.fixture
def manifest():
    return create_manifest(
        run_id="run-002",
        started_at=T0,
        compiler_version="0.1.0",
        config_hash="c",
        blueprint_hash="b",
        current_state_hash="s",
    )


def test_started_then_finished(manifest):
    step_started(manifest, step_id="control_plane", kind="control_plane", ts=T0)
    step_finished(
        manifest,
        step_id="control_plane",
        ts=T1,
        result={
            "status": "success",
            "summary": "computed KubeadmControlPlane/cluster1-abcde",
            "warnings": [],
            "artifacts": {"control_plane": "KubeadmControlPlane/cluster1-abcde"},
        },
    )

    s = manifest.steps["control_plane"]
    assert s["status"] == "success"
    assert s["kind"] == "control_plane"
    assert s["duration_ms"] == 1500
    assert s["artifacts"] == {"control_plane": "KubeadmControlPlane/cluster1-abcde"}
    assert [e["event_type"] for e in manifest.events] == ["step_started", "step_finished"]
    assert manifest.events[1]["payload"] == {"status": "success", "duration_ms": 1500}


def test_failed_records_error(manifest):
    error = {"type": "FIELD_ACCESS_FAILED", "message": "spec.version not found", "details": {}, "hint": None}

    step_started(manifest, step_id="control_plane", kind="control_plane", ts=T0)
    step_failed(manifest, step_id="control_plane", ts=T1, error=error)

    s = manifest.steps["control_plane"]
    assert s["status"] == "failed"
    assert s["error"] == error
    assert manifest.events[-1] == {
        "event_type": "step_failed",
        "timestamp": T1.isoformat(),
        "step_id": "control_plane",
        "payload": {"error": error},
    }


def test_dict_manifest_is_updated_in_place(manifest):
    data = manifest.to_dict()

    step_started(data, step_id="cluster", kind="cluster", ts=T0)
    add_event(data, event_type="note", ts=T1)

    assert data["steps"]["cluster"]["status"] == "running"
    assert [e["event_type"] for e in data["events"]] == ["step_started", "note"]
    assert "step_id" not in data["events"][1]
