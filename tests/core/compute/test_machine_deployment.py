# tests/core/compute/test_machine_deployment.py
"""
Testes do cálculo de um worker group (MachineDeployment + templates).

Cenário:
    - instância "md1" da classe "default-worker" com 2 réplicas
    - Current State sem objetos (criação) ou com o MachineDeployment "md1"
      já existente (atualização)
"""
import pytest

from topology_compiler.core.compute import compute_machine_deployment
from topology_compiler.core.constants import (
    CLUSTER_LABEL_NAME,
    CLUSTER_TOPOLOGY_MACHINE_DEPLOYMENT_LABEL_NAME,
    CLUSTER_TOPOLOGY_OWNED_LABEL,
    TEMPLATE_CLONED_FROM_NAME_ANNOTATION,
)
from topology_compiler.core.exceptions import UnknownMachineDeploymentClassError
from topology_compiler.core.model.objects import (
    MachineDeployment,
    MachineDeploymentSpec,
    MachineSpec,
    MachineTemplateSpec,
    Unstructured,
)
from topology_compiler.core.model.references import ObjectReference
from topology_compiler.core.model.state import MachineDeploymentState

IDENTITY = {
    CLUSTER_LABEL_NAME: "cluster1",
    CLUSTER_TOPOLOGY_OWNED_LABEL: "",
    CLUSTER_TOPOLOGY_MACHINE_DEPLOYMENT_LABEL_NAME: "md1",
}


def _existing_md_state(*, with_templates=True):
    obj = MachineDeployment(
        name="cluster1-md1-old00",
        namespace="default",
        spec=MachineDeploymentSpec(
            cluster_name="cluster1",
            replicas=1,
            template=MachineTemplateSpec(
                spec=MachineSpec(
                    cluster_name="cluster1",
                    bootstrap_config_ref=ObjectReference(kind="KubeadmConfigTemplate", name="bootstrap-old"),
                    infrastructure_ref=ObjectReference(kind="DockerMachineTemplate", name="infra-old"),
                )
            ),
        ),
    )
    template = Unstructured(object={"kind": "X", "metadata": {"name": "whatever"}})
    return MachineDeploymentState(
        object=obj,
        bootstrap_template=template if with_templates else None,
        infrastructure_machine_template=template if with_templates else None,
    )


def test_new_machine_deployment(blueprint, current_state, name_generator):
    md_topology = blueprint.topology.machine_deployments[0]

    state = compute_machine_deployment(blueprint, current_state, md_topology, name_generator=name_generator)

    assert name_generator.prefixes == [
        "cluster1-md1-bootstrap-",
        "cluster1-md1-infra-",
        "cluster1-md1-",
    ]
    assert state.bootstrap_template.name == "cluster1-md1-bootstrap-00001"
    assert state.infrastructure_machine_template.name == "cluster1-md1-infra-00002"

    md = state.object
    assert md.name == "cluster1-md1-00003"
    assert md.namespace == "default"
    assert md.labels == IDENTITY
    assert md.spec.cluster_name == "cluster1"
    assert md.spec.replicas == 2
    assert md.spec.template.spec.version == "v1.21.2"
    assert md.spec.template.spec.cluster_name == "cluster1"
    assert md.spec.template.spec.bootstrap_config_ref.name == "cluster1-md1-bootstrap-00001"
    assert md.spec.template.spec.infrastructure_ref.name == "cluster1-md1-infra-00002"
    assert md.spec.template.metadata.labels == dict({"md-l1": "topology", "md-l2": "class"}, **IDENTITY)
    assert md.spec.template.metadata.annotations == {"md-a1": "topology"}


def test_templates_carry_identity_and_provenance(blueprint, current_state, name_generator):
    state = compute_machine_deployment(
        blueprint, current_state, blueprint.topology.machine_deployments[0], name_generator=name_generator
    )

    assert state.bootstrap_template.get_labels() == dict({"foo": "bar"}, **IDENTITY)
    assert state.infrastructure_machine_template.get_labels() == IDENTITY
    assert state.bootstrap_template.get_annotations()[TEMPLATE_CLONED_FROM_NAME_ANNOTATION] == "worker-bootstrap"


def test_existing_machine_deployment_keeps_names(blueprint, current_state, name_generator):
    current_state.machine_deployments["md1"] = _existing_md_state()

    state = compute_machine_deployment(
        blueprint, current_state, blueprint.topology.machine_deployments[0], name_generator=name_generator
    )

    assert name_generator.prefixes == []
    assert state.object.name == "cluster1-md1-old00"
    assert state.bootstrap_template.name == "bootstrap-old"
    assert state.infrastructure_machine_template.name == "infra-old"
    assert state.object.spec.replicas == 2


def test_existing_object_without_templates_regenerates_template_names(blueprint, current_state, name_generator):
    current_state.machine_deployments["md1"] = _existing_md_state(with_templates=False)

    state = compute_machine_deployment(
        blueprint, current_state, blueprint.topology.machine_deployments[0], name_generator=name_generator
    )

    assert name_generator.prefixes == ["cluster1-md1-bootstrap-", "cluster1-md1-infra-"]
    assert state.object.name == "cluster1-md1-old00"


def test_replicas_not_declared(make_blueprint, current_state, name_generator):
    bp = make_blueprint(workers=(("default-worker", "md1", None),))

    state = compute_machine_deployment(
        bp, current_state, bp.topology.machine_deployments[0], name_generator=name_generator
    )

    assert state.object.spec.replicas is None
    assert "replicas" not in state.object.to_dict()["spec"]


def test_unknown_class(make_blueprint, current_state, name_generator):
    bp = make_blueprint(workers=(("missing-class", "md1", 1),))

    with pytest.raises(UnknownMachineDeploymentClassError) as exc:
        compute_machine_deployment(bp, current_state, bp.topology.machine_deployments[0], name_generator=name_generator)

    assert str(exc.value) == "MachineDeployment blueprint missing-class not found in ClusterClass class1"
    assert name_generator.prefixes == []
