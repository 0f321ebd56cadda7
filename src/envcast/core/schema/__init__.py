# src/envcast/core/schema/__init__.py
"""
Camada de schema do envcast.

O schema declara, para cada variável, o tipo de cast, os grupos, as regras
de obrigatoriedade, o filtro de contexto, os aliases e os defaults.

Responsabilidades do pacote:
    - Validação estrutural antecipada da declaração (`define_schema`)
    - Filtro por contexto, obrigatoriedade por grupo e agrupamento
    - Carregamento de schema declarativo a partir de YAML/JSON

Limites explícitos:
    - Não lê o store
    - Não executa a resolução de variáveis
"""

from .loader import load_schema, schema_from_data
from .model import (
    Schema,
    define_schema,
    grouped_variables,
    spec_in_context,
    validate_variables,
    variable_required,
    variables_in_context,
)
from .spec import VariableSpec

__all__ = [
    "Schema",
    "VariableSpec",
    "define_schema",
    "grouped_variables",
    "load_schema",
    "schema_from_data",
    "spec_in_context",
    "validate_variables",
    "variable_required",
    "variables_in_context",
]
