# src/topology_compiler/core/naming.py
"""
Geração de nomes para objetos calculados.

Este módulo define o colaborador de geração de nomes (`NameGenerator`), sua
implementação padrão (`SimpleNameGenerator`) e os prefixos específicos de
cada papel na topologia.

Política do `SimpleNameGenerator` (v1):
    - nome = prefixo + sufixo aleatório
    - o sufixo tem `random_length` caracteres do alfabeto configurado
      (por padrão o alfabeto Kubernetes sem vogais e dígitos ambíguos)
    - o prefixo é truncado para que o nome nunca exceda `max_name_length`

Invariantes:
    - Cada chamada produz um nome novo; o compilador nunca reexecuta em caso
      de colisão
    - Prefixos de papel sempre terminam em "-"

Limites explícitos:
    - Não consulta o backing store para detectar colisões
"""

from __future__ import annotations

import random
from typing import Any, Dict, Optional, Protocol, runtime_checkable

DEFAULT_ALPHABET = "bcdfghjklmnpqrstvwxz2456789"
DEFAULT_RANDOM_LENGTH = 5
DEFAULT_MAX_NAME_LENGTH = 63


@runtime_checkable
class NameGenerator(Protocol):
    """Colaborador externo: gera um nome único a partir de um prefixo."""

    def generate_name(self, prefix: str) -> str:
        ...


class SimpleNameGenerator:
    """Gerador padrão: prefixo (truncado) + sufixo aleatório."""

    def __init__(
        self,
        *,
        random_length: int = DEFAULT_RANDOM_LENGTH,
        max_name_length: int = DEFAULT_MAX_NAME_LENGTH,
        alphabet: str = DEFAULT_ALPHABET,
        rng: Optional[random.Random] = None,
    ):
        if random_length <= 0:
            raise ValueError("random_length must be positive")
        if max_name_length <= random_length:
            raise ValueError("max_name_length must be greater than random_length")
        if not alphabet:
            raise ValueError("alphabet must not be empty")
        self.random_length = random_length
        self.max_name_length = max_name_length
        self.alphabet = alphabet
        self._rng = rng or random.SystemRandom()

    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]], *, rng: Optional[random.Random] = None) -> "SimpleNameGenerator":
        naming = (config or {}).get("naming", {}) or {}
        return cls(
            random_length=int(naming.get("random_length", DEFAULT_RANDOM_LENGTH)),
            max_name_length=int(naming.get("max_name_length", DEFAULT_MAX_NAME_LENGTH)),
            alphabet=str(naming.get("alphabet", DEFAULT_ALPHABET)),
            rng=rng,
        )

    def generate_name(self, prefix: str) -> str:
        max_prefix = self.max_name_length - self.random_length
        if len(prefix) > max_prefix:
            prefix = prefix[:max_prefix]
        suffix = "".join(self._rng.choice(self.alphabet) for _ in range(self.random_length))
        return f"{prefix}{suffix}"


# ---------------------------------------------------------------------------
# Prefixos por papel
# ---------------------------------------------------------------------------

def cluster_object_name_prefix(cluster_name: str) -> str:
    """InfrastructureCluster e ControlPlane."""
    return f"{cluster_name}-"


def control_plane_infrastructure_machine_template_name_prefix(cluster_name: str) -> str:
    return f"{cluster_name}-controlplane-"


def bootstrap_template_name_prefix(cluster_name: str, machine_deployment_name: str) -> str:
    return f"{cluster_name}-{machine_deployment_name}-bootstrap-"


def infrastructure_machine_template_name_prefix(cluster_name: str, machine_deployment_name: str) -> str:
    return f"{cluster_name}-{machine_deployment_name}-infra-"


def machine_deployment_name_prefix(cluster_name: str, machine_deployment_name: str) -> str:
    return f"{cluster_name}-{machine_deployment_name}-"
