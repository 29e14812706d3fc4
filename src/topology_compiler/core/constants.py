# src/topology_compiler/core/constants.py
"""
Chaves canônicas de labels e anotações do Topology Compiler.

Este módulo concentra o conjunto fechado de constantes nomeadas usadas para
marcar os objetos calculados (identidade de cluster, posse pela topologia,
identidade de worker group) e a proveniência de templates clonados.

Invariantes:
    - Os valores são estáveis e compatíveis com o contrato Cluster API v1alpha4
    - Nenhum valor é mutado em runtime
"""

from __future__ import annotations

# Group/version dos objetos do próprio Cluster API.
CLUSTER_API_GROUP = "cluster.x-k8s.io"
CLUSTER_API_VERSION = "cluster.x-k8s.io/v1alpha4"

CLUSTER_KIND = "Cluster"
MACHINE_DEPLOYMENT_KIND = "MachineDeployment"

# Labels
CLUSTER_LABEL_NAME = "cluster.x-k8s.io/cluster-name"
CLUSTER_TOPOLOGY_OWNED_LABEL = "topology.cluster.x-k8s.io/owned"
CLUSTER_TOPOLOGY_MACHINE_DEPLOYMENT_LABEL_NAME = "topology.cluster.x-k8s.io/deployment-name"

# Anotações de proveniência
TEMPLATE_CLONED_FROM_NAME_ANNOTATION = "cluster.x-k8s.io/cloned-from-name"
TEMPLATE_CLONED_FROM_GROUP_KIND_ANNOTATION = "cluster.x-k8s.io/cloned-from-groupkind"

# Sufixo removido do kind do template para obter o kind do objeto gerado.
TEMPLATE_SUFFIX = "Template"


def topology_labels(cluster_name: str) -> dict:
    """Labels de identidade aplicados a todo objeto gerenciado pela topologia."""
    return {
        CLUSTER_LABEL_NAME: cluster_name,
        CLUSTER_TOPOLOGY_OWNED_LABEL: "",
    }
