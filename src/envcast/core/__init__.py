# src/envcast/core/__init__.py
"""
Core do envcast.

Este pacote contém o núcleo puro de resolução de configuração:

    - types      → contrato de cast, árvore de erros, registry e tipos built-in
    - schema     → declaração, validação, filtro por contexto e agrupamento
    - invocation → algoritmo de resolução de uma variável
    - runtime    → detentor do estado (store, schema, contexto, invocações)
    - errors     → exceções de configuração (fatais)

Princípios fundamentais:
    - Falhas de cast são dados, nunca exceções
    - Erros de configuração são fatais e levantados na definição
    - A resolução não muta store nem schema

Limites explícitos:
    - Não formata relatórios
    - Não realiza I/O além do carregamento de schema
"""
