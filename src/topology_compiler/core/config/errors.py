# src/topology_compiler/core/config/errors.py
"""
Exceções canônicas da camada de configuração.

Representam violações estruturais da configuração do compilador (arquivo
ausente, formato desconhecido, raiz inválida, conflito de tipos no merge)
e nunca erros de cálculo do Desired State.

Invariantes:
    - Todas as exceções de configuração herdam de `ConfigError`
"""


class ConfigError(Exception):
    """Exceção base para erros de configuração."""


class DefaultsNotFoundError(ConfigError):
    """O arquivo de defaults não existe no caminho informado."""


class UnsupportedConfigFormatError(ConfigError):
    """
    Formato de arquivo não suportado.

    Formatos suportados (v1):
        - YAML (.yaml, .yml)
        - JSON (.json)
    """


class InvalidConfigRootTypeError(ConfigError):
    """O conteúdo raiz do arquivo não é um mapa."""


class ConfigTypeConflictError(ConfigError):
    """
    Conflito de tipos durante o deep-merge.

    Exemplo:
        - base:     {"naming": {"random_length": 5}}
        - override: {"naming": {"random_length": "five"}}
    """
