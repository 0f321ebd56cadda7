# src/envcast/core/types/term.py
"""Tipo passthrough: retorna a entrada sem alteração. Nunca falha. Sem opções."""

from __future__ import annotations

from typing import Any, Mapping

from .base import BaseType, Ok


class Term(BaseType):
    name = "term"

    @classmethod
    def cast(cls, value: Any, options: Mapping[str, Any]):
        return Ok(value)
