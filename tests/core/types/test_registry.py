# tests/core/types/test_registry.py
"""
Testes do TypeRegistry.

Os testes asseguram que:
- todos os tipos built-in estão registrados, na ordem esperada
- identificadores duplicados são rejeitados
- identificadores desconhecidos levantam UnknownTypeError
- tipos customizados registrados ficam disponíveis por nome
"""

import pytest

try:
    from envcast.core.types.base import Ok, TypeRef, Validation, Err, cast, type_ref
    from envcast.core.types.registry import TypeRegistry, builtin_registry
    from envcast.core.types.numeric import Integer
    from envcast.core.errors import DuplicateTypeError, UnknownTypeError
except Exception as e:  # noqa: BLE001
    TypeRegistry = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing type registry. Implement:"
            "- src/envcast/core/types/registry.py (TypeRegistry, builtin_registry)"
            f"Import error: {_IMPORT_ERR}"
        )


class _Hex:
    name = "hex"

    @staticmethod
    def cast(value, options):
        try:
            return Ok(int(value, 16))
        except (TypeError, ValueError):
            return Err([Validation("expected a hexadecimal number")])


def test_builtin_registry_lists_all_types_in_order():
    _require_imports()
    assert builtin_registry().names() == [
        "boolean",
        "integer",
        "float",
        "decimal",
        "string",
        "enum",
        "email",
        "url",
        "csv",
        "json",
        "base64",
        "term",
    ]


def test_get_returns_registered_type():
    _require_imports()
    registry = builtin_registry()
    assert registry.get("integer") is Integer
    assert "integer" in registry
    assert "nope" not in registry


def test_unknown_name_raises():
    _require_imports()
    with pytest.raises(UnknownTypeError, match="nope"):
        builtin_registry().get("nope")


def test_duplicate_name_raises():
    _require_imports()
    registry = TypeRegistry()
    registry.add(_Hex)
    with pytest.raises(DuplicateTypeError):
        registry.add(_Hex)


def test_add_rejects_objects_without_cast():
    _require_imports()
    registry = TypeRegistry()
    with pytest.raises(TypeError):
        registry.add(object(), name="broken")
    with pytest.raises(ValueError):
        registry.add(_Hex, name="  ")


def test_type_ref_resolves_through_custom_registry():
    _require_imports()
    registry = TypeRegistry()
    registry.add(_Hex)
    ref = type_ref("hex", registry)
    assert ref == TypeRef(_Hex)
    assert cast("ff", ref) == Ok(255)
    assert cast("zz", ref).details == [Validation("expected a hexadecimal number")]
