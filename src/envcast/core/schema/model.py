# src/envcast/core/schema/model.py
"""
Modelo de schema do envcast.

Este módulo valida e materializa a declaração de variáveis e oferece as
operações de leitura usadas pela resolução e pelos relatórios.

Operações:
    - define_schema        → valida e materializa {nome: VariableSpec}
    - validate_variables   → apenas valida (levanta na primeira violação)
    - variables_in_context → filtra variáveis visíveis no contexto
    - variable_required    → avalia `required` para um grupo
    - grouped_variables    → agrupa variáveis por cada grupo declarado

Decisões arquiteturais:
    - A validação ocorre uma única vez, de forma antecipada, na definição
    - Violações levantam `SchemaDefinitionError` com variável e regra
    - Opções de tipo são verificadas já na definição (erro de programação)

Invariantes:
    - Nenhum schema parcialmente válido é retornado
    - A ordem de declaração das variáveis é preservada
    - Nenhuma operação muta o schema recebido

Limites explícitos:
    - Não lê store nem executa cast de valores
    - Não carrega arquivos (ver `loader`)
"""

from __future__ import annotations

import inspect
from typing import Any, Callable, Dict, List, Mapping, Tuple

from envcast.core.errors import ConfigError, SchemaDefinitionError
from envcast.core.types.base import check_type_ref
from .spec import VariableSpec


Schema = Dict[Any, VariableSpec]

_KNOWN_PARAMS = {
    "cast",
    "groups",
    "doc",
    "default",
    "default_lazy",
    "required",
    "context",
    "aliases",
    "template_value_generator",
}


def _accepts_positional(fn: Callable[..., Any], count: int) -> bool:
    try:
        inspect.signature(fn).bind(*([None] * count))
    except TypeError:
        return False
    except ValueError:
        # builtins sem assinatura introspectável
        return True
    return True


def _is_list(x: Any) -> bool:
    return isinstance(x, (list, tuple))


def _assert(condition: bool, rule: str, variable_name: Any) -> None:
    if not condition:
        raise SchemaDefinitionError(variable_name, rule)


def _spec_as_mapping(spec: Any) -> Dict[str, Any]:
    if isinstance(spec, VariableSpec):
        return {
            "cast": spec.cast,
            "groups": list(spec.groups),
            "doc": spec.doc,
            "default": spec.default,
            "default_lazy": spec.default_lazy,
            "required": spec.required,
            "context": spec.context,
            "aliases": list(spec.aliases),
            "template_value_generator": spec.template_value_generator,
        }
    return dict(spec)


def _normalize_context(raw: Any, variable_name: Any) -> Tuple[Tuple[str, Tuple[Any, ...]], ...]:
    pairs = raw.items() if isinstance(raw, Mapping) else raw
    _assert(_is_list(pairs) or isinstance(raw, Mapping), "param :context must be a list of pairs or a mapping", variable_name)
    out = []
    for pair in pairs:
        _assert(_is_list(pair) and len(pair) == 2, "param :context must be a list of pairs or a mapping", variable_name)
        key, allowed = pair
        _assert(_is_list(allowed), f"param :context allowed values for {key} must be a list", variable_name)
        out.append((key, tuple(allowed)))
    return tuple(out)


def _validate_one(variable_name: Any, raw_spec: Any) -> VariableSpec:
    _assert(isinstance(raw_spec, (Mapping, VariableSpec)), "spec must be a mapping", variable_name)
    spec = _spec_as_mapping(raw_spec)

    unknown = sorted(str(k) for k in spec if k not in _KNOWN_PARAMS)
    _assert(not unknown, f"unknown params {unknown}", variable_name)

    _assert(spec.get("cast") is not None, "param :cast is required", variable_name)
    _assert(spec.get("groups") is not None, "param :groups is required", variable_name)
    _assert(_is_list(spec["groups"]), "param :groups must be a list", variable_name)
    _assert(len(spec["groups"]) > 0, "param :groups must not be empty", variable_name)

    _assert(
        spec.get("default") is None or spec.get("default_lazy") is None,
        "param :default cannot be used with :default_lazy",
        variable_name,
    )
    _assert(
        spec.get("required") is None or spec.get("default") is None,
        "param :default cannot be used with :required",
        variable_name,
    )

    required = spec.get("required")
    _assert(
        required is None or _is_list(required) or (callable(required) and _accepts_positional(required, 1)),
        "param :required must be a list or function with arity 1",
        variable_name,
    )

    aliases = spec.get("aliases")
    _assert(aliases is None or _is_list(aliases), "param :aliases must be a list", variable_name)

    generator = spec.get("template_value_generator")
    _assert(
        generator is None or (callable(generator) and _accepts_positional(generator, 0)),
        "param :template_value_generator must be a function with arity 0",
        variable_name,
    )

    default_lazy = spec.get("default_lazy")
    _assert(
        default_lazy is None or (callable(default_lazy) and _accepts_positional(default_lazy, 1)),
        "param :default_lazy must be a function with arity 1",
        variable_name,
    )

    doc = spec.get("doc")
    _assert(doc is None or isinstance(doc, str), "param :doc must be a string", variable_name)

    try:
        cast_ref = check_type_ref(spec["cast"])
    except ConfigError as e:
        raise SchemaDefinitionError(variable_name, f"param :cast is invalid ({e})") from e

    context = spec.get("context")
    return VariableSpec(
        cast=cast_ref,
        groups=tuple(spec["groups"]),
        doc=doc,
        default=spec.get("default"),
        default_lazy=default_lazy,
        required=tuple(required) if _is_list(required) else required,
        context=_normalize_context(context, variable_name) if context is not None else None,
        aliases=tuple(aliases or ()),
        template_value_generator=generator,
    )


def define_schema(variables: Mapping[Any, Any]) -> Schema:
    """
    Valida e materializa a declaração de variáveis.

    Args:
        variables: mapa nome → spec (mapping ou VariableSpec).

    Returns:
        Schema: novo dicionário nome → VariableSpec, na ordem de declaração.

    Raises:
        SchemaDefinitionError: na primeira variável que violar uma regra.
    """
    if not isinstance(variables, Mapping):
        raise SchemaDefinitionError("<schema>", "variables must be a mapping")
    return {name: _validate_one(name, spec) for name, spec in variables.items()}


def validate_variables(variables: Mapping[Any, Any]) -> None:
    define_schema(variables)


def spec_in_context(spec: VariableSpec, context: Mapping[str, Any]) -> bool:
    if spec.context is None:
        return True
    for key, allowed in spec.context:
        if key not in context:
            raise ConfigError(f"context filter refers to {key!r}, which is missing from the context")
        if context[key] not in allowed:
            return False
    return True


def variables_in_context(schema: Schema, context: Mapping[str, Any]) -> Schema:
    """Retorna apenas as variáveis cujo filtro de contexto é satisfeito."""
    return {name: spec for name, spec in schema.items() if spec_in_context(spec, context)}


def variable_required(spec: VariableSpec, group: Any, context: Mapping[str, Any]) -> bool:
    """Indica se a variável é obrigatória em `group` no contexto dado."""
    return group in spec.required_groups(context)


def grouped_variables(schema: Schema) -> Dict[Any, List[Tuple[Any, VariableSpec]]]:
    """Agrupa variáveis por grupo; uma variável com N grupos aparece em N grupos."""
    out: Dict[Any, List[Tuple[Any, VariableSpec]]] = {}
    for name, spec in schema.items():
        for group in spec.groups:
            out.setdefault(group, []).append((name, spec))
    return out
