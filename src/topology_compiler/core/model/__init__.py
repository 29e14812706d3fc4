"""Topology Compiler: modelo de dados (referências, objetos, blueprint e estados)."""

from .blueprint import (  # noqa: F401
    Blueprint,
    ClusterClass,
    ControlPlaneBlueprint,
    ControlPlaneClass,
    ControlPlaneTopology,
    MachineDeploymentBlueprint,
    MachineDeploymentTopology,
    Topology,
)
from .objects import (  # noqa: F401
    Cluster,
    ClusterSpec,
    MachineDeployment,
    MachineDeploymentSpec,
    MachineSpec,
    MachineTemplateSpec,
    ObjectMeta,
    Unstructured,
)
from .references import ObjectReference  # noqa: F401
from .state import (  # noqa: F401
    ControlPlaneState,
    CurrentState,
    DesiredState,
    MachineDeploymentState,
)
