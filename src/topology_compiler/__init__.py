# src/topology_compiler/__init__.py
"""
Topology Compiler: compilador de estado desejado para topologias de cluster
baseadas em classes.

Este pacote raiz define o namespace público do Topology Compiler. A partir de
um Blueprint (templates organizados por classe + Topology da instância) e do
estado corrente observado de um cluster, o compilador calcula de forma
determinística o grafo completo de objetos para o qual a instância deve
convergir.

Princípios centrais:
    - O cálculo é uma função pura de suas entradas (Blueprint + Current State)
    - A identidade (nome) dos objetos é preservada entre reconciliações
    - O resultado é total ou ausente: nenhum Desired State parcial é retornado
    - Rastreabilidade estruturada (eventos, warnings, manifest) por execução

Arquitetura em alto nível:
    - core.model        → referências, objetos, blueprint, topology e estados
    - core.contract     → acessores tipados de campos em objetos sem schema
    - core.templates    → geração de objetos e clonagem de templates
    - core.compute      → Component Computers e merge de metadados
    - core.orchestrator → sequenciamento dos computers via engine fail-fast

Limites explícitos:
    - Não lê estado de um backing store
    - Não persiste nem aplica os objetos calculados
    - Não implementa o loop de controle (watch/requeue)
"""
from .core.orchestrator import DesiredStateCompiler, compute_desired_state
from .version import __version__

__all__ = ["DesiredStateCompiler", "compute_desired_state", "__version__"]
