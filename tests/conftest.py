# tests/conftest.py
"""
Fixtures compartilhados para testes do Topology Compiler.

Este módulo define fixtures reutilizáveis que fornecem:
- um gerador de nomes determinístico (prefixo + contador)
- um gerador de templates com sufixos reprodutíveis
- um Blueprint e um Current State de exemplo (cluster "cluster1")
- contexto de execução controlado (RunContext)
- Steps dummy para testes estruturais do engine

Decisões arquiteturais:
    - Fixtures são mantidas simples e explícitas
    - Nenhuma fixture realiza I/O
    - Imports do core são realizados de forma lazy para melhorar a clareza
      de erros durante falhas de import
    - Steps dummy utilizam duck typing em vez de herança

Cenário de exemplo:
    - ClusterClass "class1" com DockerClusterTemplate, KubeadmControlPlaneTemplate
      e DockerMachineTemplate para as máquinas do control plane
    - classe de MachineDeployment "default-worker"
    - Topology v1.21.2 com 3 réplicas de control plane e o worker group "md1"
"""

from datetime import datetime, timezone

import pytest

INFRA_API_VERSION = "infrastructure.cluster.x-k8s.io/v1alpha4"
CONTROL_PLANE_API_VERSION = "controlplane.cluster.x-k8s.io/v1alpha4"
BOOTSTRAP_API_VERSION = "bootstrap.cluster.x-k8s.io/v1alpha4"


class SequentialNameGenerator:
    """Gera `prefixo + contador` com 5 dígitos e registra os prefixos pedidos."""

    def __init__(self):
        self.prefixes = []

    def generate_name(self, prefix):
        self.prefixes.append(prefix)
        return f"{prefix}{len(self.prefixes):05d}"


def _template(api_version, kind, name, *, body_spec=None, labels=None):
    from topology_compiler.core.model.objects import Unstructured

    metadata = {"name": name, "namespace": "default", "resourceVersion": "42", "uid": "uid-" + name}
    if labels:
        metadata["labels"] = dict(labels)
    return Unstructured(
        object={
            "apiVersion": api_version,
            "kind": kind,
            "metadata": metadata,
            "spec": {"template": {"spec": dict(body_spec or {})}},
        }
    )


# =====================================================
# Colaboradores
# =====================================================

@pytest.fixture
def name_generator():
    """Gerador de nomes determinístico (ver `SequentialNameGenerator`)."""
    return SequentialNameGenerator()


@pytest.fixture
def template_generator(name_generator):
    """`SpecTemplateGenerator` compartilhando o gerador de nomes determinístico."""
    from topology_compiler.core.templates.generator import SpecTemplateGenerator

    return SpecTemplateGenerator(name_generator=name_generator)


@pytest.fixture
def FailingGenerator():
    """Gerador que sempre rejeita o template."""

    class _FailingGenerator:
        def __init__(self, message="template rejected"):
            self.message = message
            self.calls = 0

        def generate(self, **kwargs):
            self.calls += 1
            raise RuntimeError(self.message)

    return _FailingGenerator


# =====================================================
# Blueprint / Current State
# =====================================================

@pytest.fixture
def make_blueprint():
    """
    Fábrica de Blueprints de exemplo.

    Args (keyword):
        with_cp_infrastructure: inclui o InfrastructureMachineTemplate do
            control plane (padrão: True).
        workers: lista de `(classe, nome, réplicas)` (padrão: md1).
        cp_replicas: réplicas do control plane (padrão: 3; None = não gerenciado).
    """
    from topology_compiler.core.model.blueprint import (
        Blueprint,
        ClusterClass,
        ControlPlaneBlueprint,
        ControlPlaneClass,
        ControlPlaneTopology,
        MachineDeploymentBlueprint,
        MachineDeploymentTopology,
        Topology,
    )
    from topology_compiler.core.model.objects import ObjectMeta
    from topology_compiler.core.model.references import ObjectReference

    def _make(*, with_cp_infrastructure=True, workers=(("default-worker", "md1", 2),), cp_replicas=3):
        machine_infrastructure_ref = None
        cp_infra_template = None
        if with_cp_infrastructure:
            machine_infrastructure_ref = ObjectReference(
                api_version=INFRA_API_VERSION, kind="DockerMachineTemplate", name="cp-infra", namespace="default"
            )
            cp_infra_template = _template(INFRA_API_VERSION, "DockerMachineTemplate", "cp-infra")

        cluster_class = ClusterClass(
            name="class1",
            namespace="default",
            infrastructure_ref=ObjectReference(
                api_version=INFRA_API_VERSION, kind="DockerClusterTemplate", name="infra-template", namespace="default"
            ),
            control_plane=ControlPlaneClass(
                ref=ObjectReference(
                    api_version=CONTROL_PLANE_API_VERSION,
                    kind="KubeadmControlPlaneTemplate",
                    name="cp-template",
                    namespace="default",
                ),
                metadata=ObjectMeta(
                    labels={"l1": "class", "l2": "class"},
                    annotations={"a1": "class", "a2": "class"},
                ),
                machine_infrastructure_ref=machine_infrastructure_ref,
            ),
        )

        topology = Topology(
            class_name="class1",
            version="v1.21.2",
            control_plane=ControlPlaneTopology(
                metadata=ObjectMeta(labels={"l1": "topology"}, annotations={"a1": "topology"}),
                replicas=cp_replicas,
            ),
            machine_deployments=[
                MachineDeploymentTopology(
                    class_name=cls,
                    name=name,
                    replicas=replicas,
                    metadata=ObjectMeta(labels={"md-l1": "topology"}, annotations={"md-a1": "topology"}),
                )
                for cls, name, replicas in workers
            ],
        )

        return Blueprint(
            cluster_class=cluster_class,
            topology=topology,
            infrastructure_cluster_template=_template(
                INFRA_API_VERSION, "DockerClusterTemplate", "infra-template", body_spec={"loadBalancer": {}}
            ),
            control_plane=ControlPlaneBlueprint(
                template=_template(
                    CONTROL_PLANE_API_VERSION,
                    "KubeadmControlPlaneTemplate",
                    "cp-template",
                    body_spec={"kubeadmConfigSpec": {}},
                ),
                infrastructure_machine_template=cp_infra_template,
            ),
            machine_deployments={
                "default-worker": MachineDeploymentBlueprint(
                    metadata=ObjectMeta(
                        labels={"md-l1": "class", "md-l2": "class"},
                        annotations={"md-a1": "class"},
                    ),
                    bootstrap_template=_template(
                        BOOTSTRAP_API_VERSION, "KubeadmConfigTemplate", "worker-bootstrap", labels={"foo": "bar"}
                    ),
                    infrastructure_machine_template=_template(
                        INFRA_API_VERSION, "DockerMachineTemplate", "worker-infra"
                    ),
                ),
            },
        )

    return _make


@pytest.fixture
def blueprint(make_blueprint):
    return make_blueprint()


@pytest.fixture
def current_state():
    """Current State de um cluster recém-criado (sem objetos gerenciados)."""
    from topology_compiler.core.model.objects import Cluster
    from topology_compiler.core.model.state import CurrentState

    return CurrentState(
        cluster=Cluster(name="cluster1", namespace="default", labels={"team": "a"}),
    )


# =====================================================
# Pipeline fixtures (Step + RunContext)
# =====================================================

@pytest.fixture
def dummy_config() -> dict:
    """Configuração mínima para exercitar o engine sem ler arquivos."""
    return {
        "naming": {"random_length": 5, "max_name_length": 63},
        "engine": {"fail_fast": True, "log_level": "debug"},
    }


@pytest.fixture
def dummy_ctx(dummy_config, blueprint, current_state):
    """RunContext isolado e previsível (sem Manifest)."""
    from topology_compiler.core.pipeline.context import RunContext

    return RunContext(
        run_id="run-test-001",
        created_at=datetime(2026, 1, 16, 0, 0, 0, tzinfo=timezone.utc),
        blueprint=blueprint,
        current=current_state,
        config=dummy_config,
        meta={"source": "pytest"},
    )


@pytest.fixture
def DummyStep():
    """Step mínimo que publica `<id>.ok` no RunContext."""
    from topology_compiler.core.pipeline.types import StepKind, StepResult, StepStatus

    class _DummyStep:
        def __init__(self, step_id="infrastructure_cluster", kind=StepKind.INFRASTRUCTURE, depends_on=None):
            self.id = step_id
            self.kind = kind
            self.depends_on = depends_on or []

        def run(self, ctx):
            ctx.set_artifact(f"{self.id}.ok", True)
            return StepResult(
                step_id=self.id,
                kind=self.kind,
                status=StepStatus.SUCCESS,
                summary="dummy ok",
            )

    return _DummyStep
