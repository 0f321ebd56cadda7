# src/envcast/core/invocation.py
"""
Resolução de variáveis — Invocation.

Este módulo implementa o algoritmo central do envcast: para um nome de
variável, um contexto, um snapshot do store e o schema (já filtrado por
contexto), produz um `Invocation` com o valor resolvido, sua procedência
e a trilha ordenada de falhas de cast encontradas pelo caminho.

Máquina de estados (uma execução por chamada):
    1. Schema: variável fora do schema → in_schema=NOT_FOUND, sem cast
    2. Store (nome principal): presente → cast
         - sucesso → (store, valor, original)
         - falha   → registra (store, original) e segue para o default
    3. Aliases (apenas se o nome principal está ausente do store), em ordem:
         - primeiro alias com cast bem-sucedido → (store, valor, alias)
         - aliases com falha são registrados e a busca continua
    4. Default: `default` ou `default_lazy(context)`
         - ausente/recusado → (default, None, system)
         - cast ok          → (default, valor, schema)
         - cast com falha   → registra `default` e resulta (default, None, system)

Decisões arquiteturais:
    - Falhas de cast são dados: nenhuma exceção atravessa a resolução
    - Chaves ausentes não são erro; só falhas de cast entram na trilha
    - `required` é metadado consultivo, não é imposto aqui

Invariantes:
    - A trilha preserva a ordem cronológica: original, aliases, default
    - O store e o schema nunca são mutados
    - A mesma entrada sempre produz o mesmo Invocation

Limites explícitos:
    - Não guarda estado entre chamadas (ver `runtime.RuntimeConfig`)
    - Não formata relatórios
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from envcast.core.schema.model import Schema
from envcast.core.schema.spec import VariableSpec
from envcast.core.types.base import CastFailure, cast


logger = logging.getLogger(__name__)


class Presence(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class Source:
    """
    Procedência de um valor (ou de uma tentativa de cast).

    Formas canônicas:
        - store/original     → nome principal no store
        - store/alias (NAME) → alias no store
        - default/schema     → default declarado no schema
        - default/system     → vazio (nenhum valor utilizável)
    """

    kind: str
    origin: str
    alias: Any = None

    @classmethod
    def from_alias(cls, alias_name: Any) -> "Source":
        return cls("store", "alias", alias_name)

    @property
    def is_store(self) -> bool:
        return self.kind == "store"

    def __str__(self) -> str:
        if self.origin == "alias":
            return f"{self.kind}:alias:{self.alias}"
        return f"{self.kind}:{self.origin}"


STORE_ORIGINAL = Source("store", "original")
DEFAULT_SCHEMA = Source("default", "schema")
DEFAULT_SYSTEM = Source("default", "system")


@dataclass(frozen=True)
class ResolvedValue:
    value: Any
    source: Source


@dataclass(frozen=True)
class Invocation:
    """
    Resultado da resolução de uma variável.

    Campos:
        - in_schema: a variável está declarada no schema (filtrado)?
        - in_store: o nome principal ou algum alias está presente no store?
        - type_cast_errors: pares (procedência, CastFailure), em ordem cronológica
        - resolved: valor final com procedência
    """

    in_schema: Presence
    in_store: Presence
    resolved: ResolvedValue
    type_cast_errors: Tuple[Tuple[Source, CastFailure], ...] = field(default_factory=tuple)

    @property
    def value(self) -> Any:
        return self.resolved.value

    @property
    def source(self) -> Source:
        return self.resolved.source

    @property
    def from_store(self) -> bool:
        return self.resolved.source.is_store

    def to_dict(self) -> Dict[str, Any]:
        return {
            "in_schema": self.in_schema.value,
            "in_store": self.in_store.value,
            "source": str(self.resolved.source),
            "value": self.resolved.value,
            "type_cast_errors": [
                {"source": str(src), "value": failure.value, "type": str(failure.type_ref)}
                for src, failure in self.type_cast_errors
            ],
        }


def _fetch(store: Mapping[Any, Any], key: Any) -> Tuple[bool, Any]:
    try:
        return True, store[key]
    except KeyError:
        return False, None


def _with_default(
    variable_name: Any,
    spec: VariableSpec,
    context: Mapping[str, Any],
    in_store: Presence,
    errors: List[Tuple[Source, CastFailure]],
) -> Invocation:
    raw_default = spec.default_for(context)

    if raw_default is None:
        logger.debug("%s: no default available, resolving to empty", variable_name)
        resolved = ResolvedValue(None, DEFAULT_SYSTEM)
    else:
        result = cast(raw_default, spec.cast)
        if result.ok:
            resolved = ResolvedValue(result.value, DEFAULT_SCHEMA)
        else:
            logger.debug("%s: schema default failed to cast as %s", variable_name, result.type_ref)
            errors.append((DEFAULT_SCHEMA, result))
            resolved = ResolvedValue(None, DEFAULT_SYSTEM)

    return Invocation(
        in_schema=Presence.FOUND,
        in_store=in_store,
        resolved=resolved,
        type_cast_errors=tuple(errors),
    )


def resolve(
    variable_name: Any,
    context: Mapping[str, Any],
    store: Mapping[Any, Any],
    schema: Schema,
) -> Invocation:
    """
    Resolve uma variável contra o schema e um snapshot do store.

    Args:
        variable_name: nome da variável.
        context: contexto imutável da resolução.
        store: mapa nome → valor bruto (não é mutado).
        schema: schema já filtrado pelo contexto.

    Returns:
        Invocation: nunca levanta por valores inválidos.
    """
    spec: Optional[VariableSpec] = schema.get(variable_name)

    if spec is None:
        found, raw = _fetch(store, variable_name)
        if found:
            resolved = ResolvedValue(raw, STORE_ORIGINAL)
        else:
            resolved = ResolvedValue(None, DEFAULT_SYSTEM)
        logger.debug("%s: not declared in schema", variable_name)
        return Invocation(
            in_schema=Presence.NOT_FOUND,
            in_store=Presence.FOUND if found else Presence.NOT_FOUND,
            resolved=resolved,
        )

    errors: List[Tuple[Source, CastFailure]] = []

    found, raw = _fetch(store, variable_name)
    if found:
        result = cast(raw, spec.cast)
        if result.ok:
            return Invocation(
                in_schema=Presence.FOUND,
                in_store=Presence.FOUND,
                resolved=ResolvedValue(result.value, STORE_ORIGINAL),
            )
        logger.debug("%s: store value failed to cast as %s", variable_name, result.type_ref)
        errors.append((STORE_ORIGINAL, result))
        return _with_default(variable_name, spec, context, Presence.FOUND, errors)

    any_alias_found = False
    for alias_name in spec.aliases:
        alias_found, alias_raw = _fetch(store, alias_name)
        if not alias_found:
            continue
        any_alias_found = True
        result = cast(alias_raw, spec.cast)
        if result.ok:
            return Invocation(
                in_schema=Presence.FOUND,
                in_store=Presence.FOUND,
                resolved=ResolvedValue(result.value, Source.from_alias(alias_name)),
                type_cast_errors=tuple(errors),
            )
        logger.debug("%s: alias %s failed to cast as %s", variable_name, alias_name, result.type_ref)
        errors.append((Source.from_alias(alias_name), result))

    in_store = Presence.FOUND if any_alias_found else Presence.NOT_FOUND
    return _with_default(variable_name, spec, context, in_store, errors)
