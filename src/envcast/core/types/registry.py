# src/envcast/core/types/registry.py
"""
Registro de tipos do envcast.

Este módulo define o `TypeRegistry`, responsável por associar
identificadores textuais (ex.: "integer") a implementações de tipo,
permitindo que schemas declarativos (YAML/JSON) referenciem tipos por nome.

Decisões arquiteturais:
    - O registro é aberto: tipos customizados podem ser adicionados
    - Identificadores duplicados são erro fatal de configuração
    - A ordem de registro é preservada separadamente

Invariantes:
    - Cada identificador aponta para exatamente um tipo
    - Apenas objetos que satisfazem `CastType` são aceitos

Limites explícitos:
    - Não executa cast
    - Não valida opções de tipo
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from envcast.core.errors import DuplicateTypeError, UnknownTypeError
from .base import CastType


@dataclass
class TypeRegistry:
    """
    Registro canônico de tipos por identificador.

    Invariantes:
        - Cada `name` é único no registry
        - `names()` reflete exatamente a ordem de registro
    """

    _types: Dict[str, Any] = field(default_factory=dict, init=False, repr=False)
    _order: List[str] = field(default_factory=list, init=False, repr=False)

    def add(self, cast_type: Any, name: Optional[str] = None) -> None:
        type_name = name or getattr(cast_type, "name", None)
        if not isinstance(type_name, str) or not type_name.strip():
            raise ValueError("type name must be a non-empty string")

        if not isinstance(cast_type, CastType) and not callable(getattr(cast_type, "cast", None)):
            raise TypeError(f"{type_name} does not implement cast(value, options)")

        if type_name in self._types:
            raise DuplicateTypeError(f"Duplicate type name: {type_name}")

        self._types[type_name] = cast_type
        self._order.append(type_name)

    def get(self, name: str) -> Any:
        try:
            return self._types[name]
        except KeyError:
            raise UnknownTypeError(f"unknown type: {name!r} (known: {', '.join(self._order)})") from None

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def names(self) -> List[str]:
        return list(self._order)


_DEFAULT: Optional[TypeRegistry] = None


def builtin_registry() -> TypeRegistry:
    """Cria um registry novo contendo todos os tipos built-in."""
    from . import boolean, numeric, structured, term, text

    registry = TypeRegistry()
    for cast_type in (
        boolean.Boolean,
        numeric.Integer,
        numeric.Float,
        numeric.Decimal,
        text.String,
        text.Enum,
        text.Email,
        text.URL,
        structured.CSV,
        structured.JSON,
        structured.Base64Encoded,
        term.Term,
    ):
        registry.add(cast_type)
    return registry


def default_registry() -> TypeRegistry:
    """Registry global usado para resolver identificadores textuais."""
    global _DEFAULT
    if _DEFAULT is None:
        _DEFAULT = builtin_registry()
    return _DEFAULT


def register_type(cast_type: Any, name: Optional[str] = None) -> None:
    """Registra um tipo customizado no registry global."""
    default_registry().add(cast_type, name)
