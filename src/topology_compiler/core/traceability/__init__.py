"""
Pacote de rastreabilidade do Topology Compiler: Compile Manifest v1.

API pública:
    - CompileManifest   → estrutura canônica do Manifest
    - create_manifest   → criação explícita do Manifest
    - add_event         → registro explícito de eventos no Event Log
    - step_started      → marca início de execução de um Step
    - step_finished     → registra conclusão de um Step
    - step_failed       → registra falha de um Step
    - record_outputs    → registra os objetos do Desired State calculado
    - save_manifest     → persistência em JSON
    - load_manifest     → restauração determinística
"""

from .manifest import (
    CompileManifest,
    add_event,
    create_manifest,
    load_manifest,
    record_outputs,
    save_manifest,
    step_failed,
    step_finished,
    step_started,
)

__all__ = [
    "CompileManifest",
    "create_manifest",
    "add_event",
    "step_started",
    "step_finished",
    "step_failed",
    "record_outputs",
    "save_manifest",
    "load_manifest",
]
