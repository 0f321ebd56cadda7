"""
src/envcast/report/report_md.py

Gerador canônico da documentação de variáveis em Markdown.

Regras:
- Derivado EXCLUSIVAMENTE do schema e do contexto informado.
- Não lê o store, não resolve variáveis.
- Mesmo schema + contexto => mesmo Markdown (ordenação estável).

Estrutura:
# Variables (<chave>=<valor> ...)

## GROUP <nome>
| Name | Required | Default | Description |
"""

from __future__ import annotations

from typing import Any, List, Mapping, Sequence

from envcast.core.schema.model import Schema, grouped_variables, variable_required, variables_in_context


TABLE_HEADER: List[str] = ["Name", "Required", "Default", "Description"]


def stringify_context(context: Mapping[str, Any]) -> str:
    return " ".join(f"{k}={v}" for k, v in context.items())


def _cell(value: Any) -> str:
    if value is None:
        return ""
    return str(value).replace("\n", "").replace("|", "\\|")


def as_table(rows: Sequence[Sequence[Any]], header: Sequence[str]) -> str:
    """Tabela Markdown com colunas alinhadas pela maior célula."""
    cells = [[_cell(c) for c in row] for row in [header, *rows]]
    widths = [max(len(row[i]) for row in cells) for i in range(len(header))]
    delimiter = ["-" * w for w in widths]

    lines = []
    for row in [cells[0], delimiter, *cells[1:]]:
        body = " | ".join(cell.ljust(widths[i]) for i, cell in enumerate(row))
        lines.append(f"| {body} |")
    return "\n".join(lines)


def render_doc_md(schema: Schema, context: Mapping[str, Any]) -> str:
    """Documentação Markdown das variáveis visíveis no contexto."""
    grouped = grouped_variables(variables_in_context(schema, context))

    sections: List[str] = []
    for group in sorted(grouped, key=str):
        variables = sorted(
            grouped[group],
            key=lambda kv: (not variable_required(kv[1], group, context), str(kv[0])),
        )
        rows = [
            [
                name,
                "required" if variable_required(spec, group, context) else "",
                spec.default_for(context),
                spec.doc,
            ]
            for name, spec in variables
        ]
        sections.append(f"## GROUP {group}\n\n{as_table(rows, TABLE_HEADER)}\n")

    return f"# Variables ({stringify_context(context)})\n\n" + "\n".join(sections)
