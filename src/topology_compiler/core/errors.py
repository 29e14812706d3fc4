"""
Topology Compiler: Canonical Error Structures (v1)

Este módulo define o payload canônico de erro do compilador. Toda falha de
um passe de compilação é convertida em um `TopologyErrorPayload`, que é
registrado no StepResult, no Event Log do RunContext e no Manifest.

Erros devem ser:

- explícitos
- serializáveis
- acionáveis
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional


# ---------------------------------------------------------------------------
# Payload canônico
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TopologyErrorPayload:
    """
    Payload canônico de erro do Topology Compiler.

    Campos:
    - type: código estável do erro (não é texto livre)
    - message: mensagem curta, com o contexto acumulado pelos wraps
    - details: dados estruturados (kind, caminho do campo, classe...)
    - hint: ação sugerida ao operador
    """

    type: str
    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável do erro."""
        return asdict(self)


# ---------------------------------------------------------------------------
# Catálogo canônico de tipos de erro (v1)
# ---------------------------------------------------------------------------

TEMPLATE_GENERATION_FAILED = "TEMPLATE_GENERATION_FAILED"
FIELD_ACCESS_FAILED = "FIELD_ACCESS_FAILED"
UNKNOWN_MACHINE_DEPLOYMENT_CLASS = "UNKNOWN_MACHINE_DEPLOYMENT_CLASS"

# Engine / Execução
ENGINE_EXECUTION_ERROR = "ENGINE_EXECUTION_ERROR"
ENGINE_CONFIGURATION_ERROR = "ENGINE_CONFIGURATION_ERROR"


# ---------------------------------------------------------------------------
# Helpers de fábrica
# ---------------------------------------------------------------------------

def template_generation_failed(
    *,
    template_kind: str,
    template_name: str,
    reason: str,
    step: Optional[str] = None,
    hint: str = "Verifique se o template declara spec.template e se o ClusterClass aponta para o template correto.",
) -> TopologyErrorPayload:
    return TopologyErrorPayload(
        type=TEMPLATE_GENERATION_FAILED,
        message=f"failed to generate object from template {template_kind}: {reason}",
        details={
            "template_kind": template_kind,
            "template_name": template_name,
            "reason": reason,
            "step": step,
        },
        hint=hint,
    )


def field_access_failed(
    *,
    path: str,
    object_kind: str,
    operation: str,
    reason: str,
    step: Optional[str] = None,
    hint: str = "O schema do objeto não expõe o caminho exigido pelo contrato; verifique a versão do provedor.",
) -> TopologyErrorPayload:
    return TopologyErrorPayload(
        type=FIELD_ACCESS_FAILED,
        message=f"failed to {operation} {path} in the {object_kind} object: {reason}",
        details={
            "path": path,
            "object_kind": object_kind,
            "operation": operation,
            "reason": reason,
            "step": step,
        },
        hint=hint,
    )


def unknown_machine_deployment_class(
    *,
    class_name: str,
    cluster_class: str,
    step: Optional[str] = None,
    hint: str = "Declare a classe em spec.workers.machineDeployments do ClusterClass ou corrija a Topology.",
) -> TopologyErrorPayload:
    return TopologyErrorPayload(
        type=UNKNOWN_MACHINE_DEPLOYMENT_CLASS,
        message=f"MachineDeployment blueprint {class_name} not found in ClusterClass {cluster_class}",
        details={
            "class_name": class_name,
            "cluster_class": cluster_class,
            "step": step,
        },
        hint=hint,
    )


def engine_execution_error(
    *,
    step: Optional[str] = None,
    exc_type: Optional[str] = None,
    exc_message: Optional[str] = None,
    hint: str = "Verifique o Event Log do passe; nenhum Desired State parcial foi produzido.",
) -> TopologyErrorPayload:
    return TopologyErrorPayload(
        type=ENGINE_EXECUTION_ERROR,
        message=exc_message or "Falha inesperada durante o cálculo do estado desejado",
        details={
            "step": step,
            "exc_type": exc_type,
        },
        hint=hint,
    )


def engine_configuration_error(
    *,
    message: str = "Configuração inválida para execução do compilador",
    details: Optional[Dict[str, Any]] = None,
    hint: str = "Ajuste o Step para retornar StepResult.",
) -> TopologyErrorPayload:
    return TopologyErrorPayload(
        type=ENGINE_CONFIGURATION_ERROR,
        message=message,
        details=details or {},
        hint=hint,
    )
