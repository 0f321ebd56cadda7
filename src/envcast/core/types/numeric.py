# src/envcast/core/types/numeric.py
"""
Tipos numéricos: Integer, Float e Decimal.

Política de parse (v1):
    - O texto deve começar por um número (prefixo numérico)
    - Sem prefixo numérico → falha opaca (sem detalhes)
    - Prefixo seguido de sobra → Parsing "unexpected substring" com a sobra
    - Espaços não são aceitos ao redor do número

Integer aceita a opção `scope` ("positive" exige valor > 0).
Float e Decimal não possuem opções.
"""

from __future__ import annotations

import decimal
import json
import re
from typing import Any, Mapping

from envcast.core.errors import TypeOptionsError
from .base import BaseType, Err, Highlight, Ok, as_text, unsupported_input


_INTEGER_PREFIX = re.compile(r"[+-]?\d+")
_FLOAT_PREFIX = re.compile(r"[+-]?\d+(?:\.\d+)?(?:[eE][+-]?\d+)?")
_DECIMAL_PREFIX = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")

_INTEGER_SCOPES = ("positive",)


def _leftover(remainder: str) -> Err:
    return Err.parsing(["unexpected substring ", Highlight(json.dumps(remainder, ensure_ascii=False))])


class Integer(BaseType):
    name = "integer"
    allowed_options = frozenset({"scope"})

    @classmethod
    def _check_option_values(cls, options: Mapping[str, Any]) -> None:
        scope = options.get("scope")
        if scope is not None and scope not in _INTEGER_SCOPES:
            raise TypeOptionsError(cls.name, f"scope must be one of {list(_INTEGER_SCOPES)}, got {scope!r}")

    @classmethod
    def cast(cls, value: Any, options: Mapping[str, Any]):
        if isinstance(value, int) and not isinstance(value, bool):
            value = str(value)

        text = as_text(value)
        if text is None:
            return unsupported_input(value)

        match = _INTEGER_PREFIX.match(text)
        if match is None:
            return Err()
        if match.end() != len(text):
            return _leftover(text[match.end():])

        number = int(match.group(0))
        if options.get("scope") == "positive" and number <= 0:
            return Err.validation("expected a positive integer")
        return Ok(number)


class Float(BaseType):
    name = "float"

    @classmethod
    def cast(cls, value: Any, options: Mapping[str, Any]):
        if isinstance(value, float):
            return Ok(value)
        if isinstance(value, int) and not isinstance(value, bool):
            value = str(value)

        text = as_text(value)
        if text is None:
            return unsupported_input(value)

        match = _FLOAT_PREFIX.match(text)
        if match is None:
            return Err()
        if match.end() != len(text):
            return _leftover(text[match.end():])
        return Ok(float(match.group(0)))


class Decimal(BaseType):
    name = "decimal"

    @classmethod
    def cast(cls, value: Any, options: Mapping[str, Any]):
        if isinstance(value, decimal.Decimal):
            return Ok(value)

        text = as_text(value)
        if text is None:
            return unsupported_input(value)

        match = _DECIMAL_PREFIX.match(text)
        if match is None:
            return Err()
        if match.end() != len(text):
            return _leftover(text[match.end():])
        return Ok(decimal.Decimal(match.group(0)))
