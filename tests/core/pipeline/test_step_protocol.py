# tests/core/pipeline/test_step_protocol.py
"""
Testes do protocolo de Step.

Steps são definidos por contrato estrutural (`typing.Protocol` com
`@runtime_checkable`), não por herança.
"""
from topology_compiler.core.orchestrator import (
    ClusterStep,
    ControlPlaneStep,
    InfrastructureClusterStep,
    MachineDeploymentStep,
)
from topology_compiler.core.pipeline.step import Step
from topology_compiler.core.pipeline.types import StepResult, StepStatus


def test_dummy_step_satisfies_protocol(DummyStep, dummy_ctx):
    step = DummyStep()

    assert isinstance(step, Step)

    result = step.run(dummy_ctx)
    assert isinstance(result, StepResult)
    assert result.status == StepStatus.SUCCESS
    assert dummy_ctx.get_artifact("infrastructure_cluster.ok") is True


def test_compiler_steps_satisfy_protocol(template_generator, name_generator, blueprint):
    md = blueprint.topology.machine_deployments[0]
    steps = [
        InfrastructureClusterStep(generator=template_generator, name_generator=name_generator),
        ControlPlaneStep(generator=template_generator, name_generator=name_generator, depends_on=["infrastructure_cluster"]),
        ClusterStep(depends_on=["control_plane"]),
        MachineDeploymentStep(md_topology=md, name_generator=name_generator, depends_on=["cluster"]),
    ]

    for step in steps:
        assert isinstance(step, Step)
