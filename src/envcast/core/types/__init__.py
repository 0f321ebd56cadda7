# src/envcast/core/types/__init__.py
"""
Sistema de tipos do envcast.

Este pacote reúne o contrato de cast (`base`), o registro de tipos por
identificador (`registry`) e os tipos built-in.

Tipos built-in (identificador → classe):
    - boolean → Boolean
    - integer → Integer (opção `scope`)
    - float   → Float
    - decimal → Decimal
    - string  → String
    - enum    → Enum (opção `values`)
    - email   → Email
    - url     → URL
    - csv     → CSV (opção `of`)
    - json    → JSON (opção `keys`)
    - base64  → Base64Encoded (opção `of`)
    - term    → Term

Tipos customizados implementam `CastType` e podem ser usados diretamente
em referências de tipo ou registrados via `register_type`.
"""

from .base import (
    MAX_CAST_DEPTH,
    BaseType,
    CastFailure,
    CastOutcome,
    CastType,
    Err,
    Highlight,
    Nested,
    Ok,
    Parsing,
    TypeRef,
    Validation,
    cast,
    check_type_ref,
    type_ref,
)
from .boolean import Boolean
from .numeric import Decimal, Float, Integer
from .registry import TypeRegistry, builtin_registry, default_registry, register_type
from .structured import CSV, JSON, Base64Encoded
from .term import Term
from .text import URL, Email, Enum, String

__all__ = [
    "MAX_CAST_DEPTH",
    "BaseType",
    "CastFailure",
    "CastOutcome",
    "CastType",
    "Err",
    "Highlight",
    "Nested",
    "Ok",
    "Parsing",
    "TypeRef",
    "Validation",
    "cast",
    "check_type_ref",
    "type_ref",
    "Boolean",
    "Integer",
    "Float",
    "Decimal",
    "String",
    "Enum",
    "Email",
    "URL",
    "CSV",
    "JSON",
    "Base64Encoded",
    "Term",
    "TypeRegistry",
    "builtin_registry",
    "default_registry",
    "register_type",
]
