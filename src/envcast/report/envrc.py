"""
src/envcast/report/envrc.py

Gerador de template `.envrc` (direnv / dotenv).

Regras por variável (obrigatórias primeiro, depois por nome):
- `template_value_generator` → linha ativa com o valor gerado
- `default` / `default_lazy` → linha comentada com o default entre aspas
- obrigatória no grupo       → linha ativa, valor vazio
- demais                     → linha comentada, valor vazio

A documentação (`doc`) vira linhas de comentário acima da variável.
"""

from __future__ import annotations

import json
from typing import Any, List, Mapping, Tuple

from envcast.core.schema.model import Schema, grouped_variables, variable_required, variables_in_context
from envcast.core.schema.spec import VariableSpec


def _line_for(name: Any, spec: VariableSpec, group: Any, context: Mapping[str, Any]) -> str:
    doc = ""
    if spec.doc:
        doc = "".join(f"# {line}\n" for line in spec.doc.split("\n") if line)

    commented, value = _value_for(spec, group, context)
    prefix = "# " if commented else ""
    return f"{doc}{prefix}export {name}={value}\n"


def _value_for(spec: VariableSpec, group: Any, context: Mapping[str, Any]) -> Tuple[bool, str]:
    if spec.template_value_generator is not None:
        return False, str(spec.template_value_generator())

    if spec.has_default:
        default = spec.default_for(context)
        return True, "" if default is None else json.dumps(str(default), ensure_ascii=False)

    return not variable_required(spec, group, context), ""


def render_envrc(schema: Schema, context: Mapping[str, Any]) -> str:
    grouped = grouped_variables(variables_in_context(schema, context))

    blocks: List[str] = []
    for group in sorted(grouped, key=str):
        variables = sorted(
            grouped[group],
            key=lambda kv: (not variable_required(kv[1], group, context), str(kv[0])),
        )
        body = "".join(_line_for(name, spec, group, context) for name, spec in variables)
        blocks.append(f"# GROUP {group}\n{body}")

    return "\n".join(blocks)
