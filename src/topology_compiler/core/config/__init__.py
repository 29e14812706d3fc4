# src/topology_compiler/core/config/__init__.py

"""
Camada de configuração do Topology Compiler.

Responsabilidades do pacote:
    - Carregamento de arquivos de configuração (defaults + overrides locais)
    - Resolução de configuração final via deep-merge determinístico
    - Geração de hash canônico para rastreabilidade

Invariantes:
    - A configuração final é um dicionário puro (dict)
    - Conflitos estruturais são tratados como erro
"""

from .errors import (  # noqa: F401
    ConfigError,
    ConfigTypeConflictError,
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)
from .hashing import compute_config_hash, compute_hash  # noqa: F401
from .loader import DEFAULT_CONFIG, DEFAULTS_PATH, default_config, load_config  # noqa: F401
from .merge import deep_merge  # noqa: F401
