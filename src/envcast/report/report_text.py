"""
src/envcast/report/report_text.py

Relatório de estado para terminal.

Regras:
- Derivado EXCLUSIVAMENTE das invocações registradas, do schema e do contexto.
- Não resolve variáveis, não lê o store.
- Mesma entrada => mesmo texto (ordenação estável).
- Códigos ANSI apenas quando `emit_ansi=True`.

Estrutura:
RUNTIME CONFIG STATE
GROUP <nome>            (cor pelo status do grupo)
<*| > <glifo> <NOME>[ - <valor>]
[trilha de erros, modo detailed]

MISSING SCHEMA DEFINITIONS   (apenas se houver)

Glifos: ✓ definido e válido | - ausente | ✗ erro | ? não solicitado | * obrigatório
"""

from __future__ import annotations

from enum import Enum
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from envcast.core.invocation import Invocation, Presence, ResolvedValue, Source
from envcast.core.schema.model import Schema, grouped_variables, variable_required
from envcast.core.schema.spec import VariableSpec
from envcast.core.types.base import CastFailure, Highlight, Nested, Parsing, Validation


REPORT_MODES = ("detailed", "brief")

_ANSI = {
    "red": "\x1b[31m",
    "green": "\x1b[32m",
    "yellow": "\x1b[33m",
    "blue": "\x1b[34m",
    "cyan": "\x1b[36m",
    "light_red": "\x1b[91m",
    "light_cyan": "\x1b[96m",
}
_RESET = "\x1b[0m"


class GroupStatus(str, Enum):
    OK = "ok"
    NO_REQUIRED_VARIABLES = "no_required_variables"
    REQUIREMENTS_NOT_MET = "requirements_not_met"


_STATUS_PRIORITY = {
    GroupStatus.OK: 0,
    GroupStatus.NO_REQUIRED_VARIABLES: 1,
    GroupStatus.REQUIREMENTS_NOT_MET: 2,
}
_STATUS_COLOR = {
    GroupStatus.OK: "green",
    GroupStatus.NO_REQUIRED_VARIABLES: "blue",
    GroupStatus.REQUIREMENTS_NOT_MET: "red",
}


# -----------------------------
# Fragmentos coloridos
# -----------------------------

def _c(content: Any, color: str) -> Tuple[str, str, Any]:
    return ("color", color, content)


def _hl(content: Any) -> Tuple[str, str, Any]:
    return _c(content, "light_cyan")


def apply_colors(fragments: Any, emit_ansi: bool) -> str:
    """Achata a árvore de fragmentos em texto, com ou sem códigos ANSI."""
    if isinstance(fragments, str):
        return fragments
    if isinstance(fragments, tuple) and len(fragments) == 3 and fragments[0] == "color":
        _, color, content = fragments
        inner = apply_colors(content, emit_ansi)
        if not emit_ansi:
            return inner
        return f"{_ANSI[color]}{inner}{_RESET}"
    if isinstance(fragments, (list, tuple)):
        return "".join(apply_colors(f, emit_ansi) for f in fragments)
    return str(fragments)


def _intersperse(items: Sequence[Any], sep: Any) -> List[Any]:
    out: List[Any] = []
    for i, item in enumerate(items):
        if i:
            out.append(sep)
        out.append(item)
    return out


def _margin(level: int) -> str:
    return "   " * level


# -----------------------------
# Status de grupo
# -----------------------------

def group_status(
    variables: Sequence[Tuple[Any, VariableSpec]],
    group: Any,
    invocations: Mapping[Any, Invocation],
    context: Mapping[str, Any],
) -> GroupStatus:
    """
    Status de prontidão de um grupo.

    OK quando toda variável obrigatória do grupo foi resolvida a partir do
    store; NO_REQUIRED_VARIABLES quando o grupo não tem obrigatórias.
    """
    required = [name for name, spec in variables if variable_required(spec, group, context)]
    if not required:
        return GroupStatus.NO_REQUIRED_VARIABLES

    for name in required:
        inv = invocations.get(name)
        if inv is None or inv.in_schema is not Presence.FOUND or inv.in_store is not Presence.FOUND:
            return GroupStatus.REQUIREMENTS_NOT_MET
        if not inv.from_store:
            return GroupStatus.REQUIREMENTS_NOT_MET
    return GroupStatus.OK


# -----------------------------
# Falhas de cast
# -----------------------------

def _process_highlights(content: Any) -> Any:
    if isinstance(content, str):
        return content
    if isinstance(content, Highlight):
        return _hl(_process_highlights(content.content))
    if isinstance(content, (list, tuple)):
        return [_process_highlights(c) for c in content]
    return str(content)


def format_type_cast_error(failure: CastFailure, level: int = 0, intro: Optional[List[Any]] = None) -> List[Any]:
    """Fragmentos descrevendo uma falha de cast (recursivo para Nested)."""
    head: List[Any] = []
    if intro:
        head.extend([_margin(level), intro, "\n"])
    head.extend(
        [
            _margin(level),
            "Error while casting ",
            _c(repr(failure.value), "yellow"),
            " to ",
            _c(str(failure.type_ref), "yellow"),
        ]
    )

    lines: List[Any] = [head]
    for entry in failure.details:
        if isinstance(entry, Nested):
            lines.append(
                [
                    _margin(level + 1),
                    _c("Casting nested elements failed: \n", "light_red"),
                    _intersperse([format_type_cast_error(f, level + 2) for f in entry.failures], "\n"),
                ]
            )
        elif isinstance(entry, (Validation, Parsing)):
            text = "Validation failed" if isinstance(entry, Validation) else "Parsing failed"
            lines.append([_margin(level + 1), _c(text + ": ", "light_red"), _process_highlights(entry.content)])
        else:
            lines.append(_process_highlights(entry))

    return _intersperse(lines, "\n")


def _format_error_trail(errors: Sequence[Tuple[Source, CastFailure]]) -> List[Any]:
    out = []
    for source, failure in errors:
        if source.origin == "alias":
            intro: List[Any] = ["Attempt to use alias ", _hl(str(source.alias))]
        elif source.kind == "default":
            intro = ["Attempt to use ", _hl("schema default")]
        else:
            intro = []
        out.append(format_type_cast_error(failure, 2, intro))
    return _intersperse(out, "\n")


def _value_text(resolved: ResolvedValue) -> List[Any]:
    source = resolved.source
    if source.kind == "store":
        via = [" (via ", _hl(str(source.alias)), " alias)"] if source.origin == "alias" else []
        return ["store", via, ": ", _hl(repr(resolved.value))]
    return [f"{source.origin} default: ", _hl(repr(resolved.value))]


# -----------------------------
# Variáveis
# -----------------------------

_GLYPHS = {
    "set_and_valid": _c("✓", "green"),
    "not_set": _c("-", "cyan"),
    "error": _c("✗", "red"),
    "not_invoked": _c("?", "yellow"),
    "required": _c("*", "red"),
    "not_required": " ",
}


def _format_variable(
    name: Any,
    spec: VariableSpec,
    invocations: Mapping[Any, Invocation],
    group: Any,
    context: Mapping[str, Any],
    width: int,
    mode: str,
) -> List[Any]:
    detailed = mode == "detailed"
    inv = invocations.get(name)
    ending: Optional[List[Any]] = None
    details: Optional[List[Any]] = None

    if inv is None:
        prefix = _GLYPHS["not_invoked"]
    elif inv.from_store:
        prefix = _GLYPHS["set_and_valid"]
        ending = _value_text(inv.resolved) if detailed else None
    elif inv.in_store is Presence.NOT_FOUND:
        prefix = _GLYPHS["not_set"]
        ending = _value_text(inv.resolved) if detailed else None
    else:
        prefix = _GLYPHS["error"]
        if detailed:
            ending = _value_text(inv.resolved)
            details = _format_error_trail(inv.type_cast_errors)

    required = _GLYPHS["required"] if variable_required(spec, group, context) else _GLYPHS["not_required"]

    line: List[Any] = [required, " ", prefix, " ", str(name).ljust(width)]
    if ending:
        line.extend([" - ", ending])
    line.append("\n")
    if details:
        line.extend([details, "\n"])
    return line


def _sort_required_first(
    variables: Sequence[Tuple[Any, VariableSpec]], group: Any, context: Mapping[str, Any]
) -> List[Tuple[Any, VariableSpec]]:
    return sorted(variables, key=lambda kv: (not variable_required(kv[1], group, context), str(kv[0])))


def prepare_report(
    invocations: Mapping[Any, Invocation],
    schema: Schema,
    context: Mapping[str, Any],
    mode: str,
) -> List[Any]:
    """Árvore de fragmentos do relatório (sem aplicar cores)."""
    if mode not in REPORT_MODES:
        raise ValueError(f"mode must be one of {REPORT_MODES}, got {mode!r}")

    missing = sorted(
        (name for name, inv in invocations.items() if inv.in_schema is Presence.NOT_FOUND),
        key=str,
    )

    groups = [
        (group, group_status(variables, group, invocations, context), variables)
        for group, variables in grouped_variables(schema).items()
    ]
    groups.sort(key=lambda g: (_STATUS_PRIORITY[g[1]], str(g[0])))

    out: List[Any] = [_c("RUNTIME CONFIG STATE", "cyan"), "\n"]
    for group, status, variables in groups:
        width = max(len(str(name)) for name, _ in variables)
        out.extend([_c(f"GROUP {group}", _STATUS_COLOR[status]), "\n"])
        for name, spec in _sort_required_first(variables, group, context):
            out.append(_format_variable(name, spec, invocations, group, context, width, mode))
        out.append("\n")

    if missing:
        out.extend(["\n", _c("MISSING SCHEMA DEFINITIONS", "light_red"), "\n"])
        out.extend(f"  {name}\n" for name in missing)

    return out


def render_report(
    invocations: Mapping[Any, Invocation],
    schema: Schema,
    context: Mapping[str, Any],
    mode: str = "brief",
    *,
    emit_ansi: bool = False,
) -> str:
    return apply_colors(prepare_report(invocations, schema, context, mode), emit_ansi)
