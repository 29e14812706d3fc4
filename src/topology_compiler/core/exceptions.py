"""
Topology Compiler: Canonical Exceptions (v1)

Este módulo define as exceções tipadas do compilador de estado desejado.

Taxonomia:
- TemplateGenerationError: o colaborador de geração rejeitou um template
- FieldAccessError: um get/set do contrato falhou (caminho ausente no schema)
- UnknownMachineDeploymentClassError: a Topology referencia uma classe de
  MachineDeployment ausente no Blueprint

Regras:
- Exceções carregam apenas dados estruturados (serializáveis) em `details`.
- O contexto é acrescentado via `wrap`, que cria uma nova exceção da mesma
  classe com a mensagem prefixada; o chamador encadeia com `raise ... from`.
- Nenhuma exceção aqui é fatal para o processo: falhas de um passe são
  reexecutadas pelo loop de controle externo.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Optional

from .errors import TopologyErrorPayload


@dataclass(frozen=True, eq=False)
class TopologyException(Exception):
    """Base class para exceções internas do compilador.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - Mensagem curta e humana (sem stack trace)
    """

    code: ClassVar[str] = "TOPOLOGY_ERROR"

    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    hint: Optional[str] = None

    def __str__(self) -> str:
        return self.message

    @classmethod
    def from_payload(cls, payload: TopologyErrorPayload) -> "TopologyException":
        return cls(message=payload.message, details=dict(payload.details), hint=payload.hint)

    def to_payload(self) -> TopologyErrorPayload:
        return TopologyErrorPayload(
            type=self.code,
            message=self.message,
            details=dict(self.details),
            hint=self.hint,
        )

    def wrap(self, context: str, **details: Any) -> "TopologyException":
        """Retorna uma nova exceção da mesma classe com `context` prefixado."""
        merged = dict(self.details)
        merged.update(details)
        return type(self)(
            message=f"{context}: {self.message}",
            details=merged,
            hint=self.hint,
        )


# ---------------------------------------------------------------------------
# Geração de objetos a partir de templates
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class TemplateGenerationError(TopologyException):
    """O gerador externo não conseguiu produzir um objeto a partir do template."""

    code: ClassVar[str] = "TEMPLATE_GENERATION_FAILED"


# ---------------------------------------------------------------------------
# Contrato (acessores tipados)
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class FieldAccessError(TopologyException):
    """Um caminho de campo do contrato não existe ou tem tipo incompatível."""

    code: ClassVar[str] = "FIELD_ACCESS_FAILED"


# ---------------------------------------------------------------------------
# Blueprint
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class UnknownMachineDeploymentClassError(TopologyException):
    """A Topology referencia uma classe de MachineDeployment inexistente."""

    code: ClassVar[str] = "UNKNOWN_MACHINE_DEPLOYMENT_CLASS"
