"""Loader de schema declarativo (YAML/JSON).

Notas:
- YAML é preferencial, JSON é alternativo.
- O formato é inferido pela extensão do arquivo.
- A raiz deve ser um mapping com a chave `variables`.

Formato de `cast` no arquivo:
- identificador registrado: `cast: integer`
- tipo com opções: `cast: {type: integer, options: {scope: positive}}`
- a opção `of` (CSV/Base64) aceita recursivamente as mesmas formas

Callables (`default_lazy`, `required` como função, `template_value_generator`)
só existem na forma Python do schema.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from envcast.core.errors import (
    SchemaDefinitionError,
    SchemaFileNotFoundError,
    SchemaParseError,
    UnsupportedSchemaFormatError,
)
from .model import Schema, define_schema


def _cast_from_data(raw: Any, variable_name: Any) -> Any:
    if isinstance(raw, str):
        return raw
    if isinstance(raw, dict):
        if "type" not in raw:
            raise SchemaDefinitionError(variable_name, "param :cast mapping requires 'type'")
        extra = sorted(k for k in raw if k not in {"type", "options"})
        if extra:
            raise SchemaDefinitionError(variable_name, f"param :cast mapping has unknown keys {extra}")
        options = dict(raw.get("options") or {})
        if "of" in options:
            options["of"] = _cast_from_data(options["of"], variable_name)
        return (_cast_from_data(raw["type"], variable_name), options)
    raise SchemaDefinitionError(variable_name, "param :cast must be a type name or a {type, options} mapping")


def schema_from_data(data: Any) -> Schema:
    """Materializa um schema a partir de dados já parseados (dict)."""
    if not isinstance(data, dict):
        raise SchemaParseError("schema root must be a mapping/dict")

    variables = data.get("variables")
    if not isinstance(variables, dict):
        raise SchemaParseError("schema must define a `variables` mapping")

    prepared: Dict[Any, Any] = {}
    for name, spec in variables.items():
        if not isinstance(spec, dict):
            raise SchemaDefinitionError(name, "spec must be a mapping")
        spec = dict(spec)
        if "cast" in spec and spec["cast"] is not None:
            spec["cast"] = _cast_from_data(spec["cast"], name)
        prepared[name] = spec

    return define_schema(prepared)


def load_schema(path: Union[str, Path]) -> Schema:
    """Carrega e valida um schema a partir de YAML/JSON.

    Raises:
        SchemaFileNotFoundError: se arquivo não existir.
        UnsupportedSchemaFormatError: se extensão não suportada.
        SchemaParseError: se parsing falhar ou a raiz for inválida.
        SchemaDefinitionError: se alguma variável violar o schema.
    """
    p = Path(path)
    if not p.exists():
        raise SchemaFileNotFoundError(f"schema file not found: {p}")

    suffix = p.suffix.lower()
    raw = p.read_text(encoding="utf-8")

    try:
        if suffix in {".yml", ".yaml"}:
            data = yaml.safe_load(raw)
        elif suffix == ".json":
            data = json.loads(raw)
        else:
            raise UnsupportedSchemaFormatError(f"unsupported schema format: {suffix}")
    except UnsupportedSchemaFormatError:
        raise
    except (yaml.YAMLError, ValueError) as e:
        raise SchemaParseError(str(e) or "failed to parse schema") from e

    if data is None:
        # YAML vazio -> None
        raise SchemaParseError("schema file is empty")

    return schema_from_data(data)
