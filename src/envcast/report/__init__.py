"""
Relatórios do envcast.

Colaboradores de apresentação sobre os dados estruturados do núcleo:
    - report_text → estado de runtime para terminal (ANSI opcional)
    - report_md   → documentação de variáveis em Markdown
    - envrc       → template `.envrc`

Nenhum módulo deste pacote resolve variáveis ou lê o store.
"""

from .envrc import render_envrc
from .report_md import render_doc_md
from .report_text import GroupStatus, format_type_cast_error, group_status, render_report

__all__ = [
    "GroupStatus",
    "format_type_cast_error",
    "group_status",
    "render_doc_md",
    "render_envrc",
    "render_report",
]
