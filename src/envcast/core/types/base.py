# src/envcast/core/types/base.py
"""
Contrato canônico de cast do envcast.

Este módulo define o protocolo que todo tipo implementa, a árvore
estruturada de detalhes de erro e o despachante `cast`, que normaliza
o retorno das implementações em um resultado único.

Componentes principais:
    - Highlight / Validation / Parsing / Nested → nós da árvore de detalhes
    - CastFailure → tripla (valor ofensor, TypeRef, detalhes)
    - Ok / Err    → formas de retorno de uma implementação
    - CastType    → protocolo de tipo (duck typing)
    - TypeRef     → referência imutável a um tipo + opções
    - cast        → ponto de entrada único, com guarda de profundidade

Formas de retorno de `CastType.cast(value, options)`:
    - Ok(value)      → sucesso
    - Err()          → falha opaca (sem detalhes)
    - Err(details)   → falha detalhada
    - CastFailure    → falha de um cast interno repassada sem alteração

Decisões arquiteturais:
    - O despachante anexa valor e TypeRef à falha; implementações não repetem
    - Opções inválidas levantam `TypeOptionsError` (erro de programação)
    - Falhas de cast são dados, nunca exceções

Invariantes:
    - `cast` é determinístico para a mesma entrada
    - Uma falha contém Parsing/Validation OU exatamente um Nested, nunca ambos
    - A profundidade de casts aninhados nunca excede `MAX_CAST_DEPTH`

Limites explícitos:
    - Não formata mensagens para terminal ou Markdown
    - Não conhece schema, store ou contexto
"""

from __future__ import annotations

from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import (
    Any,
    Dict,
    List,
    Mapping,
    Optional,
    Protocol,
    Tuple,
    Union,
    runtime_checkable,
)

from envcast.core.errors import CastDepthExceededError, TypeOptionsError


MAX_CAST_DEPTH = 32

_cast_depth: ContextVar[int] = ContextVar("envcast_cast_depth", default=0)


# ---------------------------------------------------------------------------
# Árvore de detalhes de erro
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Highlight:
    """Marca um trecho para ênfase. Sem outra semântica."""

    content: Any


@dataclass(frozen=True)
class Validation:
    """Falha de regra de negócio (valor bem formado, porém não aceito)."""

    content: Any


@dataclass(frozen=True)
class Parsing:
    """Falha estrutural ou de formato."""

    content: Any


@dataclass(frozen=True)
class Nested:
    """Repasse das falhas de elementos internos (tipos de coleção)."""

    failures: Tuple["CastFailure", ...]

    def __init__(self, failures: Any) -> None:
        object.__setattr__(self, "failures", tuple(failures))


ErrorDetails = List[Any]


def _check_details_shape(details: ErrorDetails) -> None:
    has_nested = any(isinstance(d, Nested) for d in details)
    if has_nested and len(details) != 1:
        raise ValueError("error details must hold a single Nested entry or no Nested entry at all")


# ---------------------------------------------------------------------------
# Resultados
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Ok:
    """Resultado de sucesso de um cast."""

    value: Any

    ok = True


@dataclass(frozen=True)
class Err:
    """
    Retorno de falha de uma implementação de tipo.

    `Err()` representa a falha opaca (sem detalhes); `Err([...])` a falha
    detalhada. O despachante converte ambos em `CastFailure`.
    """

    details: ErrorDetails = field(default_factory=list)

    ok = False

    def __post_init__(self) -> None:
        _check_details_shape(self.details)

    @classmethod
    def parsing(cls, content: Any) -> "Err":
        return cls([Parsing(content)])

    @classmethod
    def validation(cls, content: Any) -> "Err":
        return cls([Validation(content)])


@dataclass(frozen=True)
class CastFailure:
    """
    Unidade de falha propagada por casts aninhados e pela resolução.

    Campos:
        - value: valor bruto que falhou
        - type_ref: TypeRef que rejeitou o valor
        - details: árvore de detalhes (lista ordenada)
    """

    value: Any
    type_ref: "TypeRef"
    details: ErrorDetails = field(default_factory=list)

    ok = False


CastOutcome = Union[Ok, CastFailure]


# ---------------------------------------------------------------------------
# Protocolo de tipo
# ---------------------------------------------------------------------------

@runtime_checkable
class CastType(Protocol):
    """
    Contrato canônico de um tipo do envcast.

    Qualquer objeto (classe ou instância) que exponha `name` e
    `cast(value, options)` é um tipo válido. Tipos built-in e tipos
    customizados são tratados da mesma forma pelo despachante.

    Atributos obrigatórios:
        - name: identificador estável do tipo (chave no TypeRegistry)

    Invariantes:
        - `cast` não levanta exceção para valores ruins, apenas para opções ruins
        - O retorno é sempre Ok, Err ou CastFailure
    """

    name: str

    def cast(self, value: Any, options: Mapping[str, Any]) -> Union[Ok, Err, CastFailure]:
        ...


class BaseType:
    """
    Base opcional dos tipos built-in.

    Centraliza a validação de opções: chaves desconhecidas levantam
    `TypeOptionsError` e cada tipo pode validar valores em
    `_check_option_values`.
    """

    name: str = ""
    allowed_options: frozenset = frozenset()

    @classmethod
    def check_options(cls, options: Mapping[str, Any]) -> None:
        if not isinstance(options, Mapping):
            raise TypeOptionsError(cls.name, f"options must be a mapping, got {type(options).__name__}")
        unknown = sorted(str(k) for k in options if k not in cls.allowed_options)
        if unknown:
            raise TypeOptionsError(cls.name, f"unknown options {unknown}")
        cls._check_option_values(options)

    @classmethod
    def _check_option_values(cls, options: Mapping[str, Any]) -> None:
        return None

    @classmethod
    def cast(cls, value: Any, options: Mapping[str, Any]) -> Union[Ok, Err, CastFailure]:
        raise NotImplementedError


def as_text(value: Any) -> Optional[str]:
    """Retorna `value` como str, decodificando bytes UTF-8; None se impossível."""
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray)):
        try:
            return bytes(value).decode("utf-8")
        except UnicodeDecodeError:
            return None
    return None


def unsupported_input(value: Any) -> Err:
    return Err.validation(["expected a string, got ", Highlight(type(value).__name__)])


def intersperse_highlights(values: List[str], sep: str = ", ") -> List[Any]:
    out: List[Any] = []
    for i, v in enumerate(values):
        if i:
            out.append(sep)
        out.append(Highlight(v))
    return out


# ---------------------------------------------------------------------------
# Referência de tipo
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TypeRef:
    """
    Referência imutável a um tipo e suas opções.

    Uma referência "nua" possui opções vazias. A forma textual é usada
    em relatórios: `integer` ou `csv(of=integer)`.
    """

    type: Any
    options: Dict[str, Any] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return str(getattr(self.type, "name", None) or getattr(self.type, "__name__", repr(self.type)))

    @property
    def is_bare(self) -> bool:
        return not self.options

    def __str__(self) -> str:
        if self.is_bare:
            return self.name
        opts = ", ".join(f"{k}={_option_text(v)}" for k, v in self.options.items())
        return f"{self.name}({opts})"

    def __hash__(self) -> int:
        return hash((self.name, str(self)))


def _option_text(value: Any) -> str:
    if isinstance(value, TypeRef):
        return str(value)
    if isinstance(value, tuple) and len(value) == 2 and isinstance(value[1], Mapping):
        return str(type_ref(value))
    if callable(getattr(value, "cast", None)):
        return str(TypeRef(value))
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(_option_text(v) for v in value) + "]"
    if isinstance(value, str):
        return value
    return repr(value)


def type_ref(ref: Any, registry: Any = None) -> TypeRef:
    """
    Normaliza uma referência de tipo em `TypeRef`.

    Formas aceitas:
        - TypeRef
        - identificador registrado (str), ex.: "integer"
        - objeto de tipo (classe ou instância com `name` e `cast`)
        - par (referência, mapa de opções)

    Raises:
        UnknownTypeError: identificador não registrado.
        TypeOptionsError: opções que não são um mapa.
    """
    if isinstance(ref, TypeRef):
        return ref

    if isinstance(ref, tuple):
        if len(ref) != 2:
            raise TypeOptionsError(str(ref), "type reference pair must be (type, options)")
        inner, options = ref
        base = type_ref(inner, registry)
        if options is None:
            options = {}
        if not isinstance(options, Mapping):
            raise TypeOptionsError(base.name, f"options must be a mapping, got {type(options).__name__}")
        merged = dict(base.options)
        merged.update(options)
        return TypeRef(base.type, merged)

    if isinstance(ref, str):
        if registry is None:
            from envcast.core.types.registry import default_registry

            registry = default_registry()
        return TypeRef(registry.get(ref))

    if callable(getattr(ref, "cast", None)):
        return TypeRef(ref)

    raise TypeOptionsError(repr(ref), "not a type reference")


def check_type_ref(ref: Any) -> TypeRef:
    """Normaliza `ref` e valida suas opções sem executar cast."""
    tref = type_ref(ref)
    checker = getattr(tref.type, "check_options", None)
    if checker is not None:
        checker(tref.options)
    return tref


# ---------------------------------------------------------------------------
# Despachante
# ---------------------------------------------------------------------------

def cast(value: Any, ref: Any) -> CastOutcome:
    """
    Executa o cast de `value` segundo a referência de tipo `ref`.

    Returns:
        Ok(valor convertido) ou CastFailure(value, TypeRef, detalhes).

    Raises:
        TypeOptionsError: opções desconhecidas ou malformadas.
        CastDepthExceededError: aninhamento acima de `MAX_CAST_DEPTH`.
    """
    tref = type_ref(ref)

    depth = _cast_depth.get()
    if depth >= MAX_CAST_DEPTH:
        raise CastDepthExceededError(f"nested cast depth exceeds {MAX_CAST_DEPTH} at {tref}")

    checker = getattr(tref.type, "check_options", None)
    if checker is not None:
        checker(tref.options)

    token = _cast_depth.set(depth + 1)
    try:
        result = tref.type.cast(value, tref.options)
    finally:
        _cast_depth.reset(token)

    if isinstance(result, Ok):
        return result
    if isinstance(result, CastFailure):
        return result
    if isinstance(result, Err):
        return CastFailure(value=value, type_ref=tref, details=list(result.details))

    raise TypeError(f"type {tref.name} returned {type(result).__name__}, expected Ok, Err or CastFailure")
