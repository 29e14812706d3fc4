"""Leitura de Blueprint e Current State a partir de arquivos YAML/JSON.

Formato do Blueprint (chaves de primeiro nível):
    clusterClass, topology, infrastructureClusterTemplate, controlPlane,
    machineDeployments

Formato do Current State:
    cluster, controlPlane, machineDeployments
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from topology_compiler.core.model.blueprint import Blueprint
from topology_compiler.core.model.state import CurrentState

from .errors import InputFileNotFoundError, InputParseError, UnsupportedInputFormatError

PathLike = Union[str, Path]


def load_document(path: PathLike) -> Dict[str, Any]:
    p = Path(path)
    if not p.exists():
        raise InputFileNotFoundError(f"input file not found: {p}")

    suffix = p.suffix.lower()
    raw = p.read_text(encoding="utf-8")

    try:
        if suffix in {".yml", ".yaml"}:
            data = yaml.safe_load(raw)
        elif suffix == ".json":
            data = json.loads(raw)
        else:
            raise UnsupportedInputFormatError(f"unsupported input format: {suffix}")
    except UnsupportedInputFormatError:
        raise
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise InputParseError(str(e) or f"failed to parse {p}") from e

    if data is None:
        # YAML vazio -> None
        raise InputParseError(f"input file is empty: {p}")

    if not isinstance(data, dict):
        raise InputParseError(f"input root must be a mapping/dict: {p}")

    return data


def load_blueprint(path: PathLike) -> Blueprint:
    data = load_document(path)
    try:
        return Blueprint.from_dict(data)
    except (AttributeError, TypeError, ValueError) as e:
        raise InputParseError(f"invalid blueprint document {path}: {e}") from e


def load_current_state(path: PathLike) -> CurrentState:
    data = load_document(path)
    try:
        return CurrentState.from_dict(data)
    except (AttributeError, TypeError, ValueError) as e:
        raise InputParseError(f"invalid current state document {path}: {e}") from e
