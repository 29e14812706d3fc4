# tests/core/compute/test_control_plane.py
"""
Testes do cálculo do ControlPlane e do seu InfrastructureMachineTemplate.

Os testes asseguram que:
- o template de máquinas do control plane é clonado com o prefixo do papel
- o nome corrente é lido de spec.machineTemplate.infrastructureRef
- réplicas ausentes na Topology não são escritas
- a metadata das máquinas é a fusão topology > class + labels de identidade
- falhas do contrato nomeiam o caminho do campo
"""
import pytest

from topology_compiler.core.compute import (
    compute_control_plane,
    compute_control_plane_infrastructure_machine_template,
)
from topology_compiler.core.constants import CLUSTER_LABEL_NAME, CLUSTER_TOPOLOGY_OWNED_LABEL
from topology_compiler.core.contract import obj_to_ref
from topology_compiler.core.exceptions import FieldAccessError, TemplateGenerationError
from topology_compiler.core.model.objects import Unstructured
from topology_compiler.core.model.references import ObjectReference
from topology_compiler.core.model.state import ControlPlaneState


def _current_cp(spec):
    return Unstructured(
        object={
            "apiVersion": "controlplane.cluster.x-k8s.io/v1alpha4",
            "kind": "KubeadmControlPlane",
            "metadata": {"name": "cluster1-cp", "namespace": "default"},
            "spec": spec,
        }
    )


# =====================================================
# InfrastructureMachineTemplate do control plane
# =====================================================

def test_new_infrastructure_machine_template(blueprint, current_state, name_generator):
    imt = compute_control_plane_infrastructure_machine_template(
        blueprint, current_state, name_generator=name_generator
    )

    assert imt.name == "cluster1-controlplane-00001"
    assert name_generator.prefixes == ["cluster1-controlplane-"]
    assert imt.kind == "DockerMachineTemplate"


def test_infrastructure_machine_template_reuses_current_name(blueprint, current_state, name_generator):
    current_state.control_plane = ControlPlaneState(
        object=_current_cp(
            {
                "machineTemplate": {
                    "infrastructureRef": {
                        "apiVersion": "infrastructure.cluster.x-k8s.io/v1alpha4",
                        "kind": "DockerMachineTemplate",
                        "name": "cluster1-controlplane-old12",
                    }
                }
            }
        )
    )

    imt = compute_control_plane_infrastructure_machine_template(
        blueprint, current_state, name_generator=name_generator
    )

    assert imt.name == "cluster1-controlplane-old12"
    assert name_generator.prefixes == []


def test_infrastructure_machine_template_current_ref_missing(blueprint, current_state, name_generator):
    current_state.control_plane = ControlPlaneState(object=_current_cp({}))

    with pytest.raises(FieldAccessError) as exc:
        compute_control_plane_infrastructure_machine_template(
            blueprint, current_state, name_generator=name_generator
        )

    assert str(exc.value).startswith(
        "failed to get spec.machineTemplate.infrastructureRef for the current ControlPlane object"
    )


def test_infrastructure_machine_template_not_required(make_blueprint, current_state, name_generator):
    with pytest.raises(ValueError):
        compute_control_plane_infrastructure_machine_template(
            make_blueprint(with_cp_infrastructure=False), current_state, name_generator=name_generator
        )


# =====================================================
# ControlPlane
# =====================================================

def test_control_plane_with_infrastructure_machines(blueprint, current_state, template_generator, name_generator):
    imt = compute_control_plane_infrastructure_machine_template(
        blueprint, current_state, name_generator=name_generator
    )

    cp = compute_control_plane(
        blueprint, current_state, imt, generator=template_generator, name_generator=name_generator
    )

    spec = cp.object["spec"]
    assert cp.kind == "KubeadmControlPlane"
    assert cp.name.startswith("cluster1-")
    assert spec["kubeadmConfigSpec"] == {}
    assert spec["replicas"] == 3
    assert spec["version"] == "v1.21.2"
    assert spec["machineTemplate"]["infrastructureRef"] == obj_to_ref(imt).to_dict()
    assert spec["machineTemplate"]["metadata"] == {
        "labels": {
            "l1": "topology",
            "l2": "class",
            CLUSTER_LABEL_NAME: "cluster1",
            CLUSTER_TOPOLOGY_OWNED_LABEL: "",
        },
        "annotations": {"a1": "topology", "a2": "class"},
    }


def test_control_plane_without_infrastructure_machines(make_blueprint, current_state, template_generator, name_generator):
    bp = make_blueprint(with_cp_infrastructure=False)

    cp = compute_control_plane(bp, current_state, None, generator=template_generator, name_generator=name_generator)

    assert "machineTemplate" not in cp.object["spec"]
    assert cp.object["spec"]["version"] == "v1.21.2"


def test_control_plane_without_replicas(make_blueprint, current_state, template_generator, name_generator):
    bp = make_blueprint(with_cp_infrastructure=False, cp_replicas=None)

    cp = compute_control_plane(bp, current_state, None, generator=template_generator, name_generator=name_generator)

    assert "replicas" not in cp.object["spec"]


def test_control_plane_reuses_current_name(make_blueprint, current_state, template_generator, name_generator):
    current_state.cluster.spec.control_plane_ref = ObjectReference(kind="KubeadmControlPlane", name="cluster1-cp")

    cp = compute_control_plane(
        make_blueprint(with_cp_infrastructure=False),
        current_state,
        None,
        generator=template_generator,
        name_generator=name_generator,
    )

    assert cp.name == "cluster1-cp"


def test_control_plane_generator_failure(blueprint, current_state, name_generator, FailingGenerator):
    with pytest.raises(TemplateGenerationError) as exc:
        compute_control_plane(
            blueprint, current_state, None, generator=FailingGenerator(), name_generator=name_generator
        )

    assert str(exc.value).startswith(
        "failed to generate the ControlPlane object from the KubeadmControlPlaneTemplate: "
    )


def test_control_plane_missing_infrastructure_machine_template(blueprint, current_state, template_generator, name_generator):
    with pytest.raises(FieldAccessError) as exc:
        compute_control_plane(
            blueprint, current_state, None, generator=template_generator, name_generator=name_generator
        )

    assert exc.value.details["path"] == "spec.machineTemplate.infrastructureRef"


class _ScalarMachineTemplateGenerator:
    """Gera um ControlPlane cujo `spec.machineTemplate` não é um mapa."""

    def generate(self, *, template, template_ref, namespace, labels, cluster_name):
        return Unstructured(
            object={
                "apiVersion": template.api_version,
                "kind": "KubeadmControlPlane",
                "metadata": {"namespace": namespace, "labels": dict(labels)},
                "spec": {"machineTemplate": "unsupported"},
            }
        )


def test_control_plane_contract_failure_names_path(blueprint, current_state, name_generator):
    imt = compute_control_plane_infrastructure_machine_template(
        blueprint, current_state, name_generator=name_generator
    )

    with pytest.raises(FieldAccessError) as exc:
        compute_control_plane(
            blueprint, current_state, imt, generator=_ScalarMachineTemplateGenerator(), name_generator=name_generator
        )

    assert str(exc.value).startswith(
        "failed to set spec.machineTemplate.infrastructureRef in the ControlPlane object: "
    )
