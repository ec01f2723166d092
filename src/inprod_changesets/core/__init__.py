"""
Core do InProd Changesets.

Este pacote reúne a implementação canônica do orquestrador de changesets,
independente do adapter de linha de comando que o invoca.

O core é projetado para ser:
    - determinístico (mesma entrada → mesma ordem de submissão)
    - sequencial (nunca duas requisições remotas em voo)
    - testável de forma isolada (HTTP e sleep injetáveis)

Subpacotes:
    - config  → ExecutionOptions, loader, deep-merge e fingerprint
    - files   → FileResolver
    - payload → VariableSet aplicado aos documentos de changeset
    - remote  → cliente HTTP e TaskPoller
    - engine  → Orchestrator e agregação

Limites explícitos:
    - Não acessa `os.environ` diretamente (o ambiente é sempre injetado)
    - Não formata linhas de log (apenas emite eventos estruturados)
    - Não conhece a semântica interna de validação/execução do InProd
"""
