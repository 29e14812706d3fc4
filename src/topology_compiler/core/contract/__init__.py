"""Topology Compiler: Contract (core).

Acessores tipados para os caminhos de campo que o compilador lê e escreve em
objetos semiestruturados de provedores externos:
 - ControlPlane (machineTemplate.infrastructureRef, machineTemplate.metadata,
   replicas, version)
 - construção de referências (`obj_to_ref`)
"""

from .control_plane import (  # noqa: F401
    ControlPlaneContract,
    Int64,
    Metadata,
    Ref,
    String,
    control_plane,
)
from .paths import get_nested, set_nested  # noqa: F401
from .references import obj_to_ref  # noqa: F401
