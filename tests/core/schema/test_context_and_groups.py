# tests/core/schema/test_context_and_groups.py
"""
Testes de filtro por contexto, obrigatoriedade e agrupamento.
"""

import pytest

try:
    from envcast.core.schema.model import (
        define_schema,
        grouped_variables,
        spec_in_context,
        variable_required,
        variables_in_context,
    )
    from envcast.core.errors import ConfigError
except Exception as e:  # noqa: BLE001
    define_schema = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(f"Missing schema operations. Import error: {_IMPORT_ERR}")


def test_variables_in_context_filters_by_dimension(schema, prod_context, dev_context):
    _require_imports()
    assert list(variables_in_context(schema, prod_context)) == list(schema)
    assert list(variables_in_context(schema, dev_context)) == [
        "RUNTIME_CONFIG_REPORT",
        "TZDATA_AUTOUPDATE_ENABLED",
        "LOG_LEVEL",
    ]
    assert list(variables_in_context(schema, {"env": "test", "target": "host"})) == [
        "RUNTIME_CONFIG_REPORT",
        "LOG_LEVEL",
    ]


def test_context_filter_requires_every_dimension():
    _require_imports()
    schema = define_schema(
        {"X": {"cast": "string", "groups": ["g"], "context": {"env": ["prod"], "target": ["host"]}}}
    )
    assert spec_in_context(schema["X"], {"env": "prod", "target": "host"})
    assert not spec_in_context(schema["X"], {"env": "prod", "target": "docker"})


def test_missing_context_key_is_a_configuration_error(schema):
    _require_imports()
    with pytest.raises(ConfigError, match="env"):
        variables_in_context(schema, {"target": "host"})


def test_variable_required(schema, prod_context):
    _require_imports()
    assert variable_required(schema["DATABASE_URL"], "primary_db", prod_context)
    assert not variable_required(schema["DATABASE_URL"], "other", prod_context)
    assert not variable_required(schema["DATABASE_POOL_SIZE"], "primary_db", prod_context)


def test_grouped_variables_lists_multi_group_variables_in_each_group():
    _require_imports()
    schema = define_schema(
        {
            "A": {"cast": "string", "groups": ["g1", "g2"]},
            "B": {"cast": "string", "groups": ["g2"]},
        }
    )
    grouped = grouped_variables(schema)
    assert [name for name, _ in grouped["g1"]] == ["A"]
    assert [name for name, _ in grouped["g2"]] == ["A", "B"]
