"""Erros canônicos de leitura de documentos de entrada (Blueprint, Current State).

Falhas de carregamento devem produzir erros explícitos e estáveis, distintos
das falhas de cálculo do Desired State.
"""


class InputError(Exception):
    """Erro base de documentos de entrada."""


class InputFileNotFoundError(InputError):
    """Arquivo não existe no caminho informado."""


class UnsupportedInputFormatError(InputError):
    """Formato não suportado (v1: YAML/JSON)."""


class InputParseError(InputError):
    """Falha ao parsear YAML/JSON ou ao interpretar a estrutura do documento."""
