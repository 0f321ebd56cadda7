# src/envcast/core/types/text.py
"""
Tipos textuais: String, Enum, Email e URL.

Todos recebem texto (str ou bytes UTF-8) e, em caso de sucesso, retornam
texto. Nenhum deles altera caixa ou conteúdo do valor aceito, exceto
String, que remove espaços nas extremidades.
"""

from __future__ import annotations

import enum
import re
from typing import Any, Mapping
from urllib.parse import urlsplit

from envcast.core.errors import TypeOptionsError
from .base import BaseType, Err, Highlight, Ok, as_text, intersperse_highlights, unsupported_input


class String(BaseType):
    """
    Texto não vazio.

    Retorna o valor sem espaços nas extremidades. Falha com Validation
    "blank string" quando nada resta após o trim, e "not a valid string"
    quando o conteúdo não é texto UTF-8 válido.

    Sem opções.
    """

    name = "string"

    @classmethod
    def cast(cls, value: Any, options: Mapping[str, Any]):
        if isinstance(value, (bytes, bytearray)):
            text = as_text(value)
            if text is None:
                return Err.validation("not a valid string")
        elif isinstance(value, str):
            text = value
        else:
            return unsupported_input(value)

        trimmed = text.strip()
        if not trimmed:
            return Err.validation("blank string")

        try:
            trimmed.encode("utf-8")
        except UnicodeEncodeError:
            return Err.validation("not a valid string")
        return Ok(trimmed)


def _stringify(member: Any) -> str:
    if isinstance(member, enum.Enum):
        return str(member.value)
    return str(member)


class Enum(BaseType):
    """
    Valor pertencente a uma lista fechada.

    Opções:
        - values (obrigatória): lista de valores; cada item é convertido em texto
    """

    name = "enum"
    allowed_options = frozenset({"values"})

    @classmethod
    def _check_option_values(cls, options: Mapping[str, Any]) -> None:
        values = options.get("values")
        if values is None:
            raise TypeOptionsError(cls.name, "option 'values' is required")
        if isinstance(values, (str, bytes)) or not isinstance(values, (list, tuple)):
            raise TypeOptionsError(cls.name, "option 'values' must be a list")

    @classmethod
    def cast(cls, value: Any, options: Mapping[str, Any]):
        text = as_text(value)
        if text is None:
            return unsupported_input(value)

        values = [_stringify(v) for v in options["values"]]
        if text in values:
            return Ok(text)
        return Err.validation(["expected one of: ", intersperse_highlights(values)])


class Email(BaseType):
    """
    Endereço no formato `username@host`.

    Exige exatamente um "@" com os dois lados não vazios. Não valida
    domínio nem caracteres permitidos.

    Sem opções.
    """

    name = "email"

    @classmethod
    def cast(cls, value: Any, options: Mapping[str, Any]):
        text = as_text(value)
        if text is None:
            return unsupported_input(value)

        parts = text.split("@")
        if len(parts) == 2 and parts[0] and parts[1]:
            return Ok(text)
        return Err.parsing(["expected a string in format ", Highlight("username@host")])


# "%" seguido de dois caracteres que não formam um hexadecimal
_MALFORMED_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})(?=..)", re.DOTALL)


class URL(BaseType):
    """
    URL com esquema e host.

    Falhas:
        - Validation "missing a scheme (e.g. https)"
        - Validation "missing a host"
        - Parsing "malformed query string" quando a query contém um escape
          `%XX` inválido (chaves sem valor e segmentos vazios são aceitos;
          um `%` sem dois caracteres a seguir é mantido literalmente)

    Sem opções.
    """

    name = "url"

    @classmethod
    def cast(cls, value: Any, options: Mapping[str, Any]):
        text = as_text(value)
        if text is None:
            return unsupported_input(value)

        try:
            parts = urlsplit(text)
            host = parts.hostname
        except ValueError:
            return Err.parsing("malformed URL")

        if not parts.scheme:
            return Err.validation("missing a scheme (e.g. https)")
        if not host:
            return Err.validation("missing a host")

        if _MALFORMED_ESCAPE.search(parts.query):
            return Err.parsing("malformed query string")

        return Ok(text)
