# src/topology_compiler/core/orchestrator.py
"""
Desired-State Orchestrator.

Sequencia os Component Computers como Steps de um passe executado pelo
Engine fail-fast:

    infrastructure_cluster
      → control_plane.infrastructure_machine_template   (se a classe exigir)
      → control_plane
      → cluster
      → machine_deployment.<nome>                        (na ordem da Topology)

Cada Step publica seu componente no RunContext; ao final, o Desired State é
montado a partir desses artifacts. Se qualquer Step falhar, a exceção
original do primeiro Step que falhou é relançada e nenhum Desired State é
retornado.

Uso:
    desired = compute_desired_state(blueprint, current)

    compiler = DesiredStateCompiler(config=load_config())
    ctx = compiler.new_context(blueprint, current)
    desired = compiler.compile(blueprint, current, ctx=ctx)
    save_manifest(ctx.manifest, Path("out/manifest.json"))
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from topology_compiler.core.compute import (
    compute_cluster,
    compute_control_plane,
    compute_control_plane_infrastructure_machine_template,
    compute_infrastructure_cluster,
    compute_machine_deployment,
)
from topology_compiler.core.config import compute_config_hash, compute_hash, default_config
from topology_compiler.core.engine import Engine
from topology_compiler.core.model.blueprint import Blueprint, MachineDeploymentTopology
from topology_compiler.core.model.objects import Unstructured
from topology_compiler.core.model.state import (
    ControlPlaneState,
    CurrentState,
    DesiredState,
    MachineDeploymentState,
)
from topology_compiler.core.naming import NameGenerator, SimpleNameGenerator
from topology_compiler.core.pipeline import RunContext, Step, StepKind, StepRegistry, StepResult, StepStatus
from topology_compiler.core.templates import SpecTemplateGenerator, TemplateGenerator
from topology_compiler.core.traceability import create_manifest, record_outputs
from topology_compiler.version import __version__

INFRASTRUCTURE_CLUSTER_STEP = "infrastructure_cluster"
CONTROL_PLANE_INFRASTRUCTURE_MACHINE_TEMPLATE_STEP = "control_plane.infrastructure_machine_template"
CONTROL_PLANE_STEP = "control_plane"
CLUSTER_STEP = "cluster"
MACHINE_DEPLOYMENT_STEP_PREFIX = "machine_deployment."

COMPILER_STEP_ID = "compiler"


def machine_deployment_step_id(name: str) -> str:
    return f"{MACHINE_DEPLOYMENT_STEP_PREFIX}{name}"


def _describe(obj: Any) -> str:
    return f"{obj.kind}/{obj.name}"


def _coordinates(obj: Any) -> Dict[str, str]:
    return {"apiVersion": obj.api_version, "kind": obj.kind, "name": obj.name, "namespace": obj.namespace}


def desired_state_outputs(desired: DesiredState) -> Dict[str, Dict[str, str]]:
    """Coordenadas de cada objeto do Desired State, indexadas por papel."""
    out = {
        INFRASTRUCTURE_CLUSTER_STEP: _coordinates(desired.infrastructure_cluster),
        CONTROL_PLANE_STEP: _coordinates(desired.control_plane.object),
    }
    imt = desired.control_plane.infrastructure_machine_template
    if imt is not None:
        out[CONTROL_PLANE_INFRASTRUCTURE_MACHINE_TEMPLATE_STEP] = _coordinates(imt)
    out[CLUSTER_STEP] = _coordinates(desired.cluster)
    for name, md in desired.machine_deployments.items():
        step_id = machine_deployment_step_id(name)
        out[step_id] = _coordinates(md.object)
        out[f"{step_id}.bootstrap_template"] = _coordinates(md.bootstrap_template)
        out[f"{step_id}.infrastructure_machine_template"] = _coordinates(md.infrastructure_machine_template)
    return out


def _success(step: Step, obj: Any) -> StepResult:
    return StepResult(
        step_id=step.id,
        kind=step.kind,
        status=StepStatus.SUCCESS,
        summary=f"computed {_describe(obj)}",
        artifacts={step.id: _describe(obj)},
    )


# ---------------------------------------------------------------------------
# Steps
# ---------------------------------------------------------------------------

class InfrastructureClusterStep:
    id = INFRASTRUCTURE_CLUSTER_STEP
    kind = StepKind.INFRASTRUCTURE

    def __init__(self, *, generator: TemplateGenerator, name_generator: NameGenerator):
        self.depends_on: List[str] = []
        self.generator = generator
        self.name_generator = name_generator

    def run(self, ctx: RunContext) -> StepResult:
        obj = compute_infrastructure_cluster(
            ctx.blueprint,
            ctx.current,
            generator=self.generator,
            name_generator=self.name_generator,
        )
        ctx.set_artifact(self.id, obj)
        return _success(self, obj)


class ControlPlaneInfrastructureMachineTemplateStep:
    id = CONTROL_PLANE_INFRASTRUCTURE_MACHINE_TEMPLATE_STEP
    kind = StepKind.CONTROL_PLANE

    def __init__(self, *, name_generator: NameGenerator, depends_on: List[str]):
        self.depends_on = list(depends_on)
        self.name_generator = name_generator

    def run(self, ctx: RunContext) -> StepResult:
        obj = compute_control_plane_infrastructure_machine_template(
            ctx.blueprint,
            ctx.current,
            name_generator=self.name_generator,
        )
        ctx.set_artifact(self.id, obj)
        return _success(self, obj)


class ControlPlaneStep:
    id = CONTROL_PLANE_STEP
    kind = StepKind.CONTROL_PLANE

    def __init__(self, *, generator: TemplateGenerator, name_generator: NameGenerator, depends_on: List[str]):
        self.depends_on = list(depends_on)
        self.generator = generator
        self.name_generator = name_generator

    def run(self, ctx: RunContext) -> StepResult:
        infra_template: Optional[Unstructured] = None
        if ctx.has_artifact(CONTROL_PLANE_INFRASTRUCTURE_MACHINE_TEMPLATE_STEP):
            infra_template = ctx.get_artifact(CONTROL_PLANE_INFRASTRUCTURE_MACHINE_TEMPLATE_STEP)

        obj = compute_control_plane(
            ctx.blueprint,
            ctx.current,
            infra_template,
            generator=self.generator,
            name_generator=self.name_generator,
        )
        ctx.set_artifact(self.id, obj)
        return _success(self, obj)


class ClusterStep:
    id = CLUSTER_STEP
    kind = StepKind.CLUSTER

    def __init__(self, *, depends_on: List[str]):
        self.depends_on = list(depends_on)

    def run(self, ctx: RunContext) -> StepResult:
        cluster = compute_cluster(
            ctx.current,
            ctx.get_artifact(INFRASTRUCTURE_CLUSTER_STEP),
            ctx.get_artifact(CONTROL_PLANE_STEP),
        )
        if not ctx.blueprint.has_machine_deployments():
            ctx.add_warning(step_id=self.id, message="topology declares no machine deployments")
        ctx.set_artifact(self.id, cluster)
        return _success(self, cluster)


class MachineDeploymentStep:
    kind = StepKind.WORKERS

    def __init__(
        self,
        *,
        md_topology: MachineDeploymentTopology,
        name_generator: NameGenerator,
        depends_on: List[str],
    ):
        self.id = machine_deployment_step_id(md_topology.name)
        self.depends_on = list(depends_on)
        self.md_topology = md_topology
        self.name_generator = name_generator

    def run(self, ctx: RunContext) -> StepResult:
        state = compute_machine_deployment(
            ctx.blueprint,
            ctx.current,
            self.md_topology,
            name_generator=self.name_generator,
        )
        ctx.set_artifact(self.id, state)
        return StepResult(
            step_id=self.id,
            kind=self.kind,
            status=StepStatus.SUCCESS,
            summary=f"computed {_describe(state.object)}",
            artifacts={
                "object": _describe(state.object),
                "bootstrap_template": _describe(state.bootstrap_template),
                "infrastructure_machine_template": _describe(state.infrastructure_machine_template),
            },
        )


# ---------------------------------------------------------------------------
# Compiler
# ---------------------------------------------------------------------------

class DesiredStateCompiler:
    """
    Compilador de Desired State.

    Os colaboradores são resolvidos uma vez por instância:
        - config: configuração efetiva (padrão: `default_config()`, sem I/O)
        - name_generator: padrão `SimpleNameGenerator.from_config(config)`
        - generator: padrão `SpecTemplateGenerator`

    Cada chamada de `compile` usa um RunContext próprio; instâncias podem ser
    reutilizadas para clusters diferentes.
    """

    def __init__(
        self,
        *,
        generator: Optional[TemplateGenerator] = None,
        name_generator: Optional[NameGenerator] = None,
        config: Optional[Dict[str, Any]] = None,
    ):
        self.config: Dict[str, Any] = config if config is not None else default_config()
        self.name_generator: NameGenerator = name_generator or SimpleNameGenerator.from_config(self.config)
        self.generator: TemplateGenerator = generator or SpecTemplateGenerator(name_generator=self.name_generator)

    def build_steps(self, blueprint: Blueprint) -> List[Step]:
        """
        Monta os Steps do passe encadeados por `depends_on`.

        Raises:
            DuplicateStepIdError: se a Topology repetir o nome de um worker group.
        """
        registry = StepRegistry()

        registry.add(InfrastructureClusterStep(generator=self.generator, name_generator=self.name_generator))
        previous = INFRASTRUCTURE_CLUSTER_STEP

        if blueprint.has_control_plane_infrastructure_machine():
            registry.add(
                ControlPlaneInfrastructureMachineTemplateStep(
                    name_generator=self.name_generator,
                    depends_on=[previous],
                )
            )
            previous = CONTROL_PLANE_INFRASTRUCTURE_MACHINE_TEMPLATE_STEP

        registry.add(
            ControlPlaneStep(
                generator=self.generator,
                name_generator=self.name_generator,
                depends_on=[previous],
            )
        )
        registry.add(ClusterStep(depends_on=[CONTROL_PLANE_STEP]))
        previous = CLUSTER_STEP

        for md_topology in blueprint.topology.machine_deployments:
            step = MachineDeploymentStep(
                md_topology=md_topology,
                name_generator=self.name_generator,
                depends_on=[previous],
            )
            registry.add(step)
            previous = step.id

        return registry.list()

    def new_context(
        self,
        blueprint: Blueprint,
        current: CurrentState,
        *,
        run_id: Optional[str] = None,
    ) -> RunContext:
        """Cria o RunContext de um passe com o Manifest já inicializado."""
        started_at = datetime.now(timezone.utc)
        run_id = run_id or uuid.uuid4().hex
        manifest = create_manifest(
            run_id=run_id,
            started_at=started_at,
            compiler_version=__version__,
            config_hash=compute_config_hash(self.config),
            blueprint_hash=compute_hash(blueprint.to_dict()),
            current_state_hash=compute_hash(current.to_dict()),
        )
        return RunContext(
            run_id=run_id,
            created_at=started_at,
            blueprint=blueprint,
            current=current,
            config=self.config,
            manifest=manifest,
        )

    def compile(
        self,
        blueprint: Blueprint,
        current: CurrentState,
        *,
        ctx: Optional[RunContext] = None,
    ) -> DesiredState:
        """
        Calcula o Desired State de uma instância.

        Raises:
            TopologyException: a exceção do primeiro componente que falhou.
            ValueError: se `ctx` foi criado para outras entradas.
        """
        if ctx is None:
            ctx = self.new_context(blueprint, current)
        elif ctx.blueprint is not blueprint or ctx.current is not current:
            raise ValueError("ctx was created for a different blueprint/current state")

        steps = self.build_steps(blueprint)
        ctx.log(
            step_id=COMPILER_STEP_ID,
            level="info",
            message="computing desired state",
            cluster=current.cluster.name,
            steps=[s.id for s in steps],
        )

        result = Engine(steps=steps, ctx=ctx).run()
        ctx.meta["run_result"] = result

        if not result.ok:
            ctx.log(
                step_id=COMPILER_STEP_ID,
                level="error",
                message="desired state not computed",
                failed_step=result.first_failure(),
            )
            result.raise_for_failure()

        desired = self._assemble(blueprint, ctx)
        if ctx.manifest is not None:
            record_outputs(ctx.manifest, outputs=desired_state_outputs(desired), ts=datetime.now(timezone.utc))
        ctx.log(
            step_id=COMPILER_STEP_ID,
            level="info",
            message="desired state computed",
            machine_deployments=list(desired.machine_deployments),
        )
        return desired

    def _assemble(self, blueprint: Blueprint, ctx: RunContext) -> DesiredState:
        infra_template: Optional[Unstructured] = None
        if ctx.has_artifact(CONTROL_PLANE_INFRASTRUCTURE_MACHINE_TEMPLATE_STEP):
            infra_template = ctx.get_artifact(CONTROL_PLANE_INFRASTRUCTURE_MACHINE_TEMPLATE_STEP)

        machine_deployments: Dict[str, MachineDeploymentState] = {}
        for md_topology in blueprint.topology.machine_deployments:
            machine_deployments[md_topology.name] = ctx.get_artifact(machine_deployment_step_id(md_topology.name))

        return DesiredState(
            cluster=ctx.get_artifact(CLUSTER_STEP),
            infrastructure_cluster=ctx.get_artifact(INFRASTRUCTURE_CLUSTER_STEP),
            control_plane=ControlPlaneState(
                object=ctx.get_artifact(CONTROL_PLANE_STEP),
                infrastructure_machine_template=infra_template,
            ),
            machine_deployments=machine_deployments,
        )


def compute_desired_state(
    blueprint: Blueprint,
    current: CurrentState,
    *,
    generator: Optional[TemplateGenerator] = None,
    name_generator: Optional[NameGenerator] = None,
    ctx: Optional[RunContext] = None,
    config: Optional[Dict[str, Any]] = None,
) -> DesiredState:
    """Atalho funcional para `DesiredStateCompiler(...).compile(...)`."""
    if config is None and ctx is not None:
        config = ctx.config
    compiler = DesiredStateCompiler(generator=generator, name_generator=name_generator, config=config)
    return compiler.compile(blueprint, current, ctx=ctx)
