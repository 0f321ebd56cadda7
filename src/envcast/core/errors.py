# src/envcast/core/errors.py
"""
Exceções canônicas do envcast.

Este módulo define a hierarquia oficial de exceções levantadas durante a
definição de schema, o despacho de tipos e a inicialização do estado de
configuração.

As exceções aqui definidas representam **erros de programação** (schema
mal declarado, opções de tipo inválidas, estado não inicializado), e não
valores de entrada ruins. Valores ruins nunca geram exceção: são
registrados como `CastFailure` e tratados pela resolução.

Princípios fundamentais:
    - Exceções são tipadas e semânticas
    - Erros de configuração são fatais e nunca recuperados
    - Mensagens identificam a variável ou o tipo ofensor

Invariantes:
    - Todas as exceções herdam de `EnvcastError`
    - Falhas de cast nunca são representadas por estas exceções

Limites explícitos:
    - Não realiza fallback ou recovery
    - Não formata relatórios
"""

from __future__ import annotations

from typing import Any


class EnvcastError(Exception):
    """Exceção base do envcast."""


class ConfigError(EnvcastError):
    """
    Exceção base para erros de configuração (fatais).

    Indica um erro de programação no schema ou no uso da API, nunca
    um valor de entrada inválido.
    """


class SchemaDefinitionError(ConfigError):
    """
    Exceção levantada quando a declaração de uma variável viola uma regra
    estrutural do schema.

    Decisões arquiteturais:
        - A validação ocorre uma única vez, no momento da definição
        - A mensagem identifica a variável e a regra violada

    Limites explícitos:
        - Não tenta corrigir ou completar a declaração
    """

    def __init__(self, variable_name: Any, rule: str) -> None:
        self.variable_name = variable_name
        self.rule = rule
        super().__init__(f"Assertion failed for {variable_name}: {rule}")


class TypeOptionsError(ConfigError):
    """Opções desconhecidas ou malformadas passadas a um tipo."""

    def __init__(self, type_name: str, message: str) -> None:
        self.type_name = type_name
        super().__init__(f"invalid options for {type_name}: {message}")


class UnknownTypeError(ConfigError):
    """Identificador de tipo não registrado no TypeRegistry."""


class DuplicateTypeError(ConfigError):
    """Identificador de tipo registrado mais de uma vez."""


class CastDepthExceededError(ConfigError):
    """Composição de tipos aninhados excede a profundidade máxima permitida."""


class SchemaLoadError(ConfigError):
    """Erro base do carregamento de schema a partir de arquivo."""


class SchemaFileNotFoundError(SchemaLoadError):
    """Arquivo de schema não existe no caminho informado."""


class UnsupportedSchemaFormatError(SchemaLoadError):
    """Formato de schema não suportado (YAML/JSON)."""


class SchemaParseError(SchemaLoadError):
    """Falha ao parsear YAML/JSON ou estrutura raiz inválida."""


class RuntimeNotInitializedError(EnvcastError):
    """RuntimeConfig utilizado antes de `init`."""
