# src/topology_compiler/core/config/hashing.py
"""
Hashing canônico de documentos.

O hash representa a identidade estrutural de um documento (configuração
efetiva, Blueprint ou Current State serializados) e é registrado no
Manifest de cada passe.

Política (v1):
    - JSON canônico: chaves ordenadas, separadores compactos, UTF-8
    - SHA-256 em hexadecimal (64 caracteres)
    - valores sem representação JSON (ex.: timestamps lidos do YAML) entram
      pelo seu `str()`
"""

import hashlib
import json
from typing import Any, Dict


def compute_hash(data: Dict[str, Any]) -> str:
    """Hash SHA-256 do JSON canônico de `data` (independe da ordem das chaves)."""
    if not isinstance(data, dict):
        raise TypeError(f"Documento para hashing deve ser dict, recebido: {type(data).__name__}")

    canonical_json = json.dumps(
        data,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        default=str,
    )
    return hashlib.sha256(canonical_json.encode("utf-8")).hexdigest()


def compute_config_hash(config: Dict[str, Any]) -> str:
    """Hash da configuração efetiva."""
    return compute_hash(config)
