# src/envcast/core/types/structured.py
"""
Tipos estruturados: CSV, JSON e Base64Encoded.

CSV e Base64Encoded delegam a um tipo interno (opção `of`, padrão
`string`) através do despachante `cast`, ou seja, por recursão mútua
protegida pela guarda de profundidade.

Decisões arquiteturais:
    - CSV é uma coleção: reporta TODAS as falhas internas em um único Nested
    - Base64Encoded é um duto transparente: repassa a falha interna sem Nested
    - JSON não possui tipo interno
"""

from __future__ import annotations

import base64
import binascii
import csv
import io
import json
import re
import sys
from typing import Any, List, Mapping, Optional, Tuple

from envcast.core.errors import TypeOptionsError
from .base import BaseType, Err, Nested, Ok, as_text, check_type_ref, cast, unsupported_input


_INNER_DEFAULT = "string"


def _inner_ref(options: Mapping[str, Any]) -> Any:
    return options.get("of", _INNER_DEFAULT)


class _OfOptions(BaseType):
    allowed_options = frozenset({"of"})

    @classmethod
    def _check_option_values(cls, options: Mapping[str, Any]) -> None:
        if "of" in options:
            check_type_ref(options["of"])


# ---------------------------------------------------------------------------
# CSV
# ---------------------------------------------------------------------------

def _stray_quote(text: str) -> Optional[int]:
    """Posição de uma aspa fora de campo entre aspas (RFC 4180), se houver."""
    in_quotes = False
    at_field_start = True
    i = 0
    while i < len(text):
        c = text[i]
        if in_quotes:
            if c == '"':
                if text[i + 1:i + 2] == '"':
                    i += 2
                    continue
                in_quotes = False
        elif c == '"':
            if not at_field_start:
                return i
            in_quotes = True
            at_field_start = False
        elif c in ",\r\n":
            at_field_start = True
        else:
            at_field_start = False
        i += 1
    return None


def _parse_record(text: str) -> Tuple[Optional[List[str]], Optional[Err]]:
    if _stray_quote(text) is not None:
        return None, Err.parsing(f'unexpected escape character " in {json.dumps(text, ensure_ascii=False)}')

    try:
        rows = list(csv.reader(io.StringIO(text, newline=""), strict=True))
    except csv.Error as e:
        return None, Err.parsing(str(e))

    if not rows:
        return [], None
    if len(rows) > 1:
        return None, Err.parsing("expected a CSV with only 1 line")
    return rows[0], None


class CSV(_OfOptions):
    """
    Uma linha CSV (RFC 4180) cujos campos passam pelo tipo interno `of`.

    Opções:
        - of: referência de tipo aplicada a cada campo (padrão: string)
    """

    name = "csv"

    @classmethod
    def cast(cls, value: Any, options: Mapping[str, Any]):
        text = as_text(value)
        if text is None:
            return unsupported_input(value)

        fields, error = _parse_record(text)
        if error is not None:
            return error

        of = _inner_ref(options)
        values: List[Any] = []
        failures = []
        for item in fields:
            result = cast(item, of)
            if result.ok:
                values.append(result.value)
            else:
                failures.append(result)

        if failures:
            return Err([Nested(failures)])
        return Ok(values)


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------

_KEY_MODES = ("strings", "atoms", "atoms!")

# constantes dentro de strings não contam
_STRING_OR_CONSTANT = re.compile(r'"(?:[^"\\]|\\.)*"|(-?Infinity|NaN)', re.DOTALL)


class _NonStandardConstant(ValueError):
    pass


def _reject_constant(name: str) -> Any:
    raise _NonStandardConstant(name)


def _constant_position(text: str) -> int:
    for match in _STRING_OR_CONSTANT.finditer(text):
        if match.group(1):
            return match.start(1)
    return 0


def _byte_offset(text: str, pos: int) -> int:
    return len(text[:pos].encode("utf-8", errors="surrogatepass"))


def _symbol_pairs(strict: bool):
    def hook(pairs):
        out = {}
        for key, item in pairs:
            if strict or key.isidentifier():
                key = sys.intern(key)
            out[key] = item
        return out

    return hook


class JSON(BaseType):
    """
    Documento JSON (RFC 8259).

    NaN, Infinity e -Infinity não são JSON válido e falham com Parsing.
    A posição dos erros de sintaxe é um offset em bytes (UTF-8).

    Opções:
        - keys: "strings" (padrão) mantém as chaves como texto;
          "atoms!" converte toda chave em símbolo (str internada);
          "atoms" converte apenas chaves que são identificadores Python
          e mantém as demais como texto.
    """

    name = "json"
    allowed_options = frozenset({"keys"})

    @classmethod
    def _check_option_values(cls, options: Mapping[str, Any]) -> None:
        keys = options.get("keys", "strings")
        if keys not in _KEY_MODES:
            raise TypeOptionsError(cls.name, f"keys must be one of {list(_KEY_MODES)}, got {keys!r}")

    @classmethod
    def cast(cls, value: Any, options: Mapping[str, Any]):
        text = as_text(value)
        if text is None:
            return unsupported_input(value)

        keys = options.get("keys", "strings")
        hook = None if keys == "strings" else _symbol_pairs(strict=keys == "atoms!")

        try:
            return Ok(json.loads(text, object_pairs_hook=hook, parse_constant=_reject_constant))
        except json.JSONDecodeError as e:
            return Err.parsing(f"{e.msg} at position {_byte_offset(text, e.pos)}")
        except _NonStandardConstant:
            pos = _byte_offset(text, _constant_position(text))
            return Err.parsing(f"Expecting value at position {pos}")


# ---------------------------------------------------------------------------
# Base64
# ---------------------------------------------------------------------------

class Base64Encoded(_OfOptions):
    """
    Texto codificado em base64 padrão (com padding).

    O conteúdo decodificado (bytes) passa pelo tipo interno `of`; a falha
    interna é repassada sem alteração.

    Opções:
        - of: referência de tipo aplicada ao conteúdo decodificado (padrão: string)
    """

    name = "base64"

    @classmethod
    def cast(cls, value: Any, options: Mapping[str, Any]):
        text = as_text(value)
        if text is None:
            return unsupported_input(value)

        try:
            decoded = base64.b64decode(text, validate=True)
        except (binascii.Error, ValueError):
            return Err.parsing("not a base64 encoded string")

        return cast(decoded, _inner_ref(options))
