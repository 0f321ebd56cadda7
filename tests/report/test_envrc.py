# tests/report/test_envrc.py
"""
Testes do gerador de template `.envrc`.
"""

import pytest

try:
    from envcast.core.schema.model import define_schema
    from envcast.report.envrc import render_envrc
except Exception as e:  # noqa: BLE001
    render_envrc = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(f"Missing .envrc template. Import error: {_IMPORT_ERR}")


def test_render_envrc_for_production(schema, prod_context):
    _require_imports()
    assert render_envrc(schema, prod_context) == (
        "# GROUP base\n"
        '# export LOG_LEVEL="info"\n'
        "# Autoupdate timezones from IANA Time Zone Database\n"
        '# export TZDATA_AUTOUPDATE_ENABLED="false"\n'
        "\n"
        "# GROUP misc\n"
        '# export RUNTIME_CONFIG_REPORT="disabled"\n'
        "\n"
        "# GROUP primary_db\n"
        "# Full DB URL\n"
        "export DATABASE_URL=\n"
        '# export DATABASE_POOL_SIZE="10"\n'
    )


def test_generated_values_are_active():
    """Valores gerados (ex.: segredos) entram como linhas ativas."""
    _require_imports()
    schema = define_schema(
        {
            "SECRET_KEY_BASE": {
                "cast": "string",
                "groups": ["web"],
                "doc": "Signing secret\nKeep it private",
                "template_value_generator": lambda: "s3cr3t",
            },
            "WEB_HOST": {"cast": "string", "groups": ["web"]},
        }
    )
    assert render_envrc(schema, {}) == (
        "# GROUP web\n"
        "# Signing secret\n"
        "# Keep it private\n"
        "export SECRET_KEY_BASE=s3cr3t\n"
        "# export WEB_HOST=\n"
    )
