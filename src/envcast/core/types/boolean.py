# src/envcast/core/types/boolean.py
"""
Tipo booleano.

Converte "enabled", "true", "1", "yes" em True e "disabled", "false",
"0", "no" em False. A comparação é sensível a maiúsculas/minúsculas.
Valores bool/int já tipados são convertidos em texto antes da comparação
(True -> "true", 1 -> "1").

Sem opções.
"""

from __future__ import annotations

from typing import Any, Mapping

from .base import BaseType, Err, Ok, as_text, intersperse_highlights, unsupported_input


TRUE_VALUES = ("enabled", "true", "1", "yes")
FALSE_VALUES = ("disabled", "false", "0", "no")


class Boolean(BaseType):
    name = "boolean"

    @classmethod
    def cast(cls, value: Any, options: Mapping[str, Any]):
        if isinstance(value, bool):
            value = "true" if value else "false"
        elif isinstance(value, int):
            value = str(value)

        text = as_text(value)
        if text is None:
            return unsupported_input(value)

        if text in TRUE_VALUES:
            return Ok(True)
        if text in FALSE_VALUES:
            return Ok(False)

        return Err.validation(
            ["expected one of: ", intersperse_highlights(list(TRUE_VALUES + FALSE_VALUES))]
        )
