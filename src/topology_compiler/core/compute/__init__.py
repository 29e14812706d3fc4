"""Topology Compiler: Component computers.

Cada função calcula um componente do Desired State a partir do Blueprint e do
Current State:
 - InfrastructureCluster
 - InfrastructureMachineTemplate do control plane
 - ControlPlane
 - Cluster
 - MachineDeployment (um por worker group)
"""

from .cluster import compute_cluster  # noqa: F401
from .control_plane import (  # noqa: F401
    compute_control_plane,
    compute_control_plane_infrastructure_machine_template,
)
from .infrastructure_cluster import compute_infrastructure_cluster  # noqa: F401
from .machine_deployment import compute_machine_deployment  # noqa: F401
from .metadata import merge_map  # noqa: F401
