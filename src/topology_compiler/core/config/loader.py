# src/topology_compiler/core/config/loader.py
"""
Carregamento da configuração do compilador.

A configuração efetiva é resolvida a partir de:
    - defaults obrigatórios (por padrão, os defaults empacotados)
    - overrides locais opcionais (ignorados se o arquivo não existir)

Seções reconhecidas (v1):
    naming:
      random_length: 5        # tamanho do sufixo aleatório
      max_name_length: 63     # limite de nome do Kubernetes
      alphabet: "..."         # alfabeto do sufixo
    engine:
      fail_fast: true
      log_level: info
"""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml  # PyYAML

from .errors import (
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)
from .merge import deep_merge

DEFAULTS_PATH = Path(__file__).with_name("defaults.yaml")

# Espelho em código de `defaults.yaml`; usado quando o chamador não
# fornece configuração, sem leitura de arquivo.
DEFAULT_CONFIG: Dict[str, Any] = {
    "naming": {
        "random_length": 5,
        "max_name_length": 63,
        "alphabet": "bcdfghjklmnpqrstvwxz2456789",
    },
    "engine": {
        "fail_fast": True,
        "log_level": "info",
    },
}

PathLike = Union[str, Path]


def _load_file(path: Path) -> Dict[str, Any]:
    """Lê um arquivo YAML/JSON cuja raiz deve ser um mapa (arquivo vazio → {})."""
    if not path.exists():
        raise DefaultsNotFoundError(f"Arquivo de defaults não encontrado: {path}")

    suffix = path.suffix.lower()

    if suffix in {".yaml", ".yml"}:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

    elif suffix == ".json":
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)

    else:
        raise UnsupportedConfigFormatError(f"Formato não suportado: {path.suffix}")

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise InvalidConfigRootTypeError(
            f"Config root deve ser dict, recebido: {type(data).__name__}"
        )

    return data


def load_config(
    *,
    defaults_path: PathLike = DEFAULTS_PATH,
    local_path: Optional[PathLike] = None,
) -> Dict[str, Any]:
    """
    Resolve a configuração efetiva (defaults + override local).

    Raises:
        DefaultsNotFoundError: se o arquivo de defaults não existir.
        UnsupportedConfigFormatError: se a extensão não for suportada.
        InvalidConfigRootTypeError: se a raiz não for um mapa.
        ConfigTypeConflictError: se o override conflitar com os defaults.
    """
    effective = _load_file(Path(defaults_path))

    if local_path is not None:
        local_file = Path(local_path)
        if local_file.exists():
            effective = deep_merge(effective, _load_file(local_file))

    return effective


def default_config() -> Dict[str, Any]:
    """Cópia independente de `DEFAULT_CONFIG` (não lê arquivos)."""
    return copy.deepcopy(DEFAULT_CONFIG)
