"""
Linha de comando do envcast.

Subcomandos:
    - gen-doc-md  → documentação Markdown das variáveis
    - gen-envrc   → template `.envrc`
    - report      → resolve todas as variáveis do schema contra o ambiente e imprime o estado
    - check       → falha (exit 1) se alguma variável utilizada não está no schema

Exemplos:
    envcast gen-doc-md --schema envcast.yaml --context env=prod --output RUNTIME_ENV.md
    envcast report --schema envcast.yaml --context env=dev --mode detailed
    envcast check --schema envcast.yaml --context env=prod --variable DATABASE_URL
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from envcast.core.errors import EnvcastError
from envcast.core.runtime import RuntimeConfig
from envcast.core.schema.loader import load_schema
from envcast.report.envrc import render_envrc
from envcast.report.report_md import render_doc_md


logger = logging.getLogger(__name__)


def _parse_context(pairs: Sequence[str]) -> Dict[str, Any]:
    context: Dict[str, Any] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise argparse.ArgumentTypeError(f"context must be key=value, got {pair!r}")
        context[key] = value
    return context


def _write_output(path: str, content: str, force: bool) -> int:
    p = Path(path)
    if p.exists() and not force:
        print(f"File {p} exists. Use --force to overwrite.", file=sys.stderr)
        return 1
    p.write_text(content, encoding="utf-8")
    print(f"Wrote {p}")
    return 0


def _runtime_for(args: argparse.Namespace) -> RuntimeConfig:
    runtime = RuntimeConfig()
    runtime.init(schema=load_schema(args.schema), context=_parse_context(args.context), store=dict(os.environ))
    for name in runtime.schema:
        runtime.get(name)
    for name in getattr(args, "variable", None) or []:
        runtime.get(name)
    return runtime


def _cmd_gen_doc_md(args: argparse.Namespace) -> int:
    content = render_doc_md(load_schema(args.schema), _parse_context(args.context))
    return _write_output(args.output, content, args.force)


def _cmd_gen_envrc(args: argparse.Namespace) -> int:
    content = render_envrc(load_schema(args.schema), _parse_context(args.context))
    return _write_output(args.output, content, args.force)


def _cmd_report(args: argparse.Namespace) -> int:
    runtime = _runtime_for(args)
    print(runtime.report(args.mode, emit_ansi=args.color), end="")
    return 0


def _cmd_check(args: argparse.Namespace) -> int:
    runtime = _runtime_for(args)
    missing = runtime.missing_definitions()
    if not missing:
        print("✓ All configuration variables are defined in schema")
        return 0

    print("✗ Found variables missing from schema:", file=sys.stderr)
    for name in missing:
        print(f"  - {name}", file=sys.stderr)
    print(f"Configuration check failed: {len(missing)} variable(s) not defined in schema", file=sys.stderr)
    return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="envcast", description="Cast and inspect runtime configuration")
    sub = parser.add_subparsers(dest="command", required=True)

    def common(p: argparse.ArgumentParser) -> None:
        p.add_argument("--schema", required=True, help="schema file (YAML or JSON)")
        p.add_argument("--context", action="append", default=[], metavar="KEY=VALUE", help="context dimension")

    p = sub.add_parser("gen-doc-md", help="generate variables documentation in Markdown")
    common(p)
    p.add_argument("--output", required=True)
    p.add_argument("--force", action="store_true", help="overwrite an existing output file")
    p.set_defaults(func=_cmd_gen_doc_md)

    p = sub.add_parser("gen-envrc", help="generate a .envrc template")
    common(p)
    p.add_argument("--output", required=True)
    p.add_argument("--force", action="store_true", help="overwrite an existing output file")
    p.set_defaults(func=_cmd_gen_envrc)

    p = sub.add_parser("report", help="print the runtime config state")
    common(p)
    p.add_argument("--mode", choices=["brief", "detailed"], default="brief")
    p.add_argument("--color", action="store_true", help="emit ANSI colors")
    p.set_defaults(func=_cmd_report)

    p = sub.add_parser("check", help="verify used variables are defined in schema")
    common(p)
    p.add_argument("--variable", action="append", default=[], help="variable name used by the application")
    p.set_defaults(func=_cmd_check)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return args.func(args)
    except argparse.ArgumentTypeError as e:
        parser.error(str(e))
    except EnvcastError as e:
        logger.debug("envcast command failed", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
