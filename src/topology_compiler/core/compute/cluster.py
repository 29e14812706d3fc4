"""Cálculo do Cluster desejado."""

from __future__ import annotations

from topology_compiler.core.constants import topology_labels
from topology_compiler.core.contract import obj_to_ref
from topology_compiler.core.model.objects import Cluster, Unstructured
from topology_compiler.core.model.state import CurrentState


def compute_cluster(
    current: CurrentState,
    infrastructure_cluster: Unstructured,
    control_plane: Unstructured,
) -> Cluster:
    """
    Retorna uma cópia do Cluster corrente com os labels de topologia e as
    referências para o InfrastructureCluster e o ControlPlane calculados.

    Apenas os campos gerenciados pela instância são tocados; `spec.topology`
    e demais campos seguem opacos. O Cluster de entrada nunca é mutado.
    """
    cluster = current.cluster.deep_copy()

    labels = dict(cluster.labels or {})
    labels.update(topology_labels(cluster.name))
    cluster.labels = labels

    cluster.spec.infrastructure_ref = obj_to_ref(infrastructure_cluster)
    cluster.spec.control_plane_ref = obj_to_ref(control_plane)

    return cluster
