# tests/core/schema/test_define_schema.py
"""
Testes da validação estrutural do schema (`define_schema`).

Os testes asseguram que:
- declarações válidas são materializadas em VariableSpec
- cada regra violada levanta SchemaDefinitionError com variável e regra
- opções de tipo inválidas são detectadas já na definição
"""

import pytest

try:
    from envcast.core.schema.model import define_schema, validate_variables
    from envcast.core.schema.spec import VariableSpec
    from envcast.core.types import Integer, TypeRef
    from envcast.core.errors import ConfigError, SchemaDefinitionError
except Exception as e:  # noqa: BLE001
    define_schema = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing schema model. Implement:"
            "- src/envcast/core/schema/model.py (define_schema)"
            "- src/envcast/core/schema/spec.py (VariableSpec)"
            f"Import error: {_IMPORT_ERR}"
        )


def _assert_rule(spec, rule_fragment):
    with pytest.raises(SchemaDefinitionError) as exc:
        define_schema({"VAR": spec})
    assert exc.value.variable_name == "VAR"
    assert rule_fragment in exc.value.rule
    assert str(exc.value).startswith("Assertion failed for VAR: ")


def test_define_schema_materializes_specs(raw_schema):
    _require_imports()
    schema = define_schema(raw_schema)

    assert list(schema) == list(raw_schema)
    pool = schema["DATABASE_POOL_SIZE"]
    assert isinstance(pool, VariableSpec)
    assert pool.cast == TypeRef(Integer, {"scope": "positive"})
    assert pool.aliases == ("DB_POOL_SIZE", "POOL_SIZE")
    assert pool.groups == ("primary_db",)
    assert pool.context == (("env", ("prod",)),)
    assert pool.has_default


def test_define_schema_accepts_already_defined_specs(schema):
    _require_imports()
    assert define_schema(schema) == schema


def test_define_schema_does_not_mutate_input(raw_schema):
    _require_imports()
    before = {k: dict(v) for k, v in raw_schema.items()}
    define_schema(raw_schema)
    assert raw_schema == before


def test_required_params():
    _require_imports()
    _assert_rule({"groups": ["g"]}, "param :cast is required")
    _assert_rule({"cast": "string"}, "param :groups is required")
    _assert_rule({"cast": "string", "groups": "g"}, "param :groups must be a list")
    _assert_rule({"cast": "string", "groups": []}, "param :groups must not be empty")


def test_default_is_exclusive_with_default_lazy_and_required():
    _require_imports()
    _assert_rule(
        {"cast": "string", "groups": ["g"], "default": "x", "default_lazy": lambda ctx: "y"},
        "param :default cannot be used with :default_lazy",
    )
    _assert_rule(
        {"cast": "string", "groups": ["g"], "default": "x", "required": ["g"]},
        "param :default cannot be used with :required",
    )


def test_function_arity_rules():
    _require_imports()
    _assert_rule(
        {"cast": "string", "groups": ["g"], "required": lambda: ["g"]},
        "param :required must be a list or function with arity 1",
    )
    _assert_rule(
        {"cast": "string", "groups": ["g"], "default_lazy": lambda: "x"},
        "param :default_lazy must be a function with arity 1",
    )
    _assert_rule(
        {"cast": "string", "groups": ["g"], "template_value_generator": lambda n: "x"},
        "param :template_value_generator must be a function with arity 0",
    )


def test_aliases_doc_and_unknown_params():
    _require_imports()
    _assert_rule({"cast": "string", "groups": ["g"], "aliases": "OTHER"}, "param :aliases must be a list")
    _assert_rule({"cast": "string", "groups": ["g"], "doc": 42}, "param :doc must be a string")
    _assert_rule({"cast": "string", "groups": ["g"], "defualt": "x"}, "unknown params")


def test_invalid_type_options_fail_at_definition():
    """Opções de tipo inválidas são erro de programação, detectado antecipadamente."""
    _require_imports()
    _assert_rule({"cast": ("integer", {"scope": "negative"}), "groups": ["g"]}, "param :cast is invalid")
    _assert_rule({"cast": "no_such_type", "groups": ["g"]}, "param :cast is invalid")
    _assert_rule({"cast": ("csv", {"of": ("enum", {})}), "groups": ["g"]}, "param :cast is invalid")


def test_schema_definition_error_is_a_config_error():
    _require_imports()
    with pytest.raises(ConfigError):
        validate_variables({"VAR": {"cast": "string"}})


def test_required_as_function_of_context():
    _require_imports()
    schema = define_schema(
        {
            "SENTRY_DSN": {
                "cast": "url",
                "groups": ["sentry"],
                "required": lambda ctx: ["sentry"] if ctx["env"] == "prod" else [],
            }
        }
    )
    spec = schema["SENTRY_DSN"]
    assert spec.required_groups({"env": "prod"}) == ["sentry"]
    assert spec.required_groups({"env": "dev"}) == []


def test_to_dict_omits_callables(schema):
    _require_imports()
    assert schema["DATABASE_URL"].to_dict() == {
        "cast": "url",
        "groups": ["primary_db"],
        "doc": "Full DB URL",
        "required": ["primary_db"],
        "context": {"env": ["prod"]},
        "aliases": ["DB_URL"],
    }
    assert "default_lazy" not in schema["LOG_LEVEL"].to_dict()
