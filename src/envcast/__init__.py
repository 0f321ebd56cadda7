# src/envcast/__init__.py
"""
envcast — cast e inspeção de configuração de runtime guiados por schema.

Para cada variável declarada, o envcast determina o valor bruto (direto,
via alias ou default), converte-o por um sistema de tipos plugável e
registra o resultado (valor ou erro estruturado) para relatórios.

Arquitetura em alto nível:
    - core.types      → contrato de cast e tipos built-in
    - core.schema     → declaração e validação do schema
    - core.invocation → resolução de uma variável
    - core.runtime    → estado de runtime (store, contexto, invocações)
    - report          → relatórios de terminal, Markdown e `.envrc`

Exemplo:

    from envcast import RuntimeConfig, define_schema

    schema = define_schema({
        "DATABASE_POOL_SIZE": {
            "cast": ("integer", {"scope": "positive"}),
            "aliases": ["DB_POOL_SIZE"],
            "default": "10",
            "groups": ["primary_db"],
        },
    })
    runtime = RuntimeConfig()
    runtime.init(schema=schema, context={"env": "prod"})
    pool_size = runtime.get("DATABASE_POOL_SIZE")
"""

from .core.errors import ConfigError, EnvcastError, SchemaDefinitionError, TypeOptionsError
from .core.invocation import Invocation, Presence, Source, resolve
from .core.runtime import RuntimeConfig
from .core.schema import VariableSpec, define_schema, load_schema
from .core.types import CastFailure, Ok, TypeRef, cast, register_type

__version__ = "1.0.0"

__all__ = [
    "CastFailure",
    "ConfigError",
    "EnvcastError",
    "Invocation",
    "Ok",
    "Presence",
    "RuntimeConfig",
    "SchemaDefinitionError",
    "Source",
    "TypeOptionsError",
    "TypeRef",
    "VariableSpec",
    "cast",
    "define_schema",
    "load_schema",
    "register_type",
    "resolve",
]
