# src/topology_compiler/core/__init__.py
"""
Core do Topology Compiler.

Este pacote contém a implementação canônica do compilador de estado desejado,
reunindo modelo de dados, acessores de contrato, clonagem de templates,
Component Computers, engine de execução e rastreabilidade.

O core é projetado para ser:
    - determinístico (dado o mesmo gerador de nomes)
    - testável de forma isolada
    - livre de I/O durante o cálculo do estado desejado

Componentes principais:
    - model        → tipos de entrada e saída do compilador
    - contract     → get/set tipados para caminhos conhecidos de campos
    - templates    → gerador de objetos a partir de templates e cloner
    - compute      → um computer por tipo de entidade gerenciada
    - pipeline     → protocolo de Step, RunContext e registry
    - engine       → planner determinístico e execução fail-fast
    - config       → configuração (defaults + overrides) e hashing
    - inputs       → carregamento de documentos YAML/JSON
    - traceability → Manifest e Event Log de cada compilação

Limites explícitos:
    - Não contém acesso a APIs remotas
    - Não aplica nem compara objetos com o estado corrente
"""
