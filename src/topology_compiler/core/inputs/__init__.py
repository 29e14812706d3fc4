"""Topology Compiler: Inputs.

Carregamento de documentos de entrada (YAML/JSON) para os modelos do
compilador.
"""

from .errors import (  # noqa: F401
    InputError,
    InputFileNotFoundError,
    InputParseError,
    UnsupportedInputFormatError,
)
from .loader import load_blueprint, load_current_state, load_document  # noqa: F401
