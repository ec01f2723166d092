# src/inprod_changesets/cli.py
"""
CLI do InProd Changesets.

Subcomandos:
    run     → resolve os arquivos, valida/executa no InProd e publica
              os outputs `status` e `result`
    render  → imprime um changeset após a injeção de variáveis (sem rede)

Os inputs chegam pela convenção `INPUT_<NOME>` da CI e podem ser
sobrescritos por flags. Eventos do RunContext são escritos como
workflow commands (`::debug::`, `::warning::`, `::error::`).

Códigos de saída:
    0 → run concluída com SUCCESS/SUBMITTED
    1 → erro de configuração, pré-voo ou run com falha
"""

from __future__ import annotations

import argparse
import os
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, TextIO

import httpx

from inprod_changesets import __version__
from inprod_changesets.core.config.errors import ConfigError
from inprod_changesets.core.config.hashing import compute_options_fingerprint
from inprod_changesets.core.config.loader import load_config, read_action_inputs
from inprod_changesets.core.config.options import ExecutionOptions
from inprod_changesets.core.context import RUN_STEP_ID, LogSink, RunContext
from inprod_changesets.core.engine import Orchestrator
from inprod_changesets.core.errors import exception_to_error
from inprod_changesets.core.exceptions import ChangesetException, RunFailedError
from inprod_changesets.core.files import resolve_files
from inprod_changesets.core.outputs import OUTPUT_FILE_ENV, write_outputs
from inprod_changesets.core.payload import inject_text
from inprod_changesets.core.remote import InProdClient
from inprod_changesets.core.types import ChangesetFile
from inprod_changesets.core.variables import parse_variables


_COMMANDS = {
    "debug": "::debug::",
    "warning": "::warning::",
    "error": "::error::",
}


def escape_data(text: str) -> str:
    return text.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def workflow_sink(stream: TextIO) -> LogSink:
    """Sink que escreve cada evento como linha de log da CI."""

    def sink(event: Dict[str, Any]) -> None:
        prefix = _COMMANDS.get(event["level"])
        message = str(event["message"])
        if prefix is None:
            stream.write(message + "\n")
        else:
            stream.write(prefix + escape_data(message) + "\n")

    return sink


@dataclass
class _Runtime:
    environ: Mapping[str, str]
    stdout: TextIO
    transport: Optional[httpx.BaseTransport]
    sleep: Callable[[float], None]


def _flag_inputs(args: argparse.Namespace) -> Dict[str, str]:
    flags = {
        "changeset_file": args.changeset_file,
        "base_url": args.base_url,
        "environment": args.environment,
        "validate_before_execute": args.validate_before_execute,
        "validate_only": args.validate_only,
        "polling_timeout_minutes": args.polling_timeout_minutes,
        "execution_strategy": args.execution_strategy,
        "fail_fast": args.fail_fast,
        "changeset_variables": args.variables,
    }
    return {k: v for k, v in flags.items() if v is not None}


def _log_banner(ctx: RunContext, options: ExecutionOptions, files: List[ChangesetFile]) -> None:
    lines = [
        "InProd Run Changesets Action v1",
        f"Base URL: {options.base_url}",
    ]
    if options.environment:
        lines.append(f"Target environment: {options.environment}")
    lines += [
        f"Files to process: {len(files)}",
        f"Execution strategy: {options.strategy.value}",
        f"Fail fast: {str(options.fail_fast).lower()}",
        f"Validate before execute: {str(options.validate_before_execute).lower()}",
        f"Validate only: {str(options.validate_only).lower()}",
        (
            f"Polling timeout: {options.poll_timeout_seconds // 60} minutes "
            f"({options.poll_timeout_seconds} seconds)"
        ),
    ]
    if options.variables:
        lines.append(f"Changeset variables: {len(options.variables)} variable(s) provided")
    for line in lines:
        ctx.log(step_id=RUN_STEP_ID, level="info", message=line)
    ctx.log(
        step_id=RUN_STEP_ID,
        level="debug",
        message=f"Options fingerprint: {ctx.meta['options_fingerprint']}",
    )


def _fail(ctx: RunContext, exc: BaseException) -> int:
    error = exception_to_error(exc)
    ctx.log(step_id=RUN_STEP_ID, level="error", message=error.message, error=error.to_dict())
    return 1


def cmd_run(args: argparse.Namespace, rt: _Runtime) -> int:
    ctx = RunContext.new(sink=workflow_sink(rt.stdout))

    inputs = read_action_inputs(rt.environ)
    inputs.update(_flag_inputs(args))

    try:
        config = load_config(inputs=inputs, environ=rt.environ, config_path=args.config)
    except ConfigError as e:
        return _fail(ctx, e)

    options = config.options
    rt.stdout.write(f"::add-mask::{escape_data(options.api_key)}\n")
    if options.variables:
        ctx.log(
            step_id=RUN_STEP_ID,
            level="debug",
            message=f"Parsed changeset variables: {options.variables.names()} (values masked)",
        )
    ctx.meta["options_fingerprint"] = compute_options_fingerprint(options)

    try:
        files = resolve_files(config.changeset_file, ctx)
    except (ChangesetException, ConfigError) as e:
        return _fail(ctx, e)

    _log_banner(ctx, options, files)

    output_path = rt.environ.get(OUTPUT_FILE_ENV) or None

    with InProdClient(
        base_url=options.base_url,
        api_key=options.api_key,
        transport=rt.transport,
    ) as client:
        orchestrator = Orchestrator.from_client(
            options=options,
            ctx=ctx,
            client=client,
            sleep=rt.sleep,
        )
        try:
            run_result = orchestrator.run(files)
        except RunFailedError as e:
            if e.run_result is not None:
                write_outputs(
                    e.run_result.status,
                    e.run_result.results,
                    output_path=output_path,
                    stream=rt.stdout,
                )
            return _fail(ctx, e)

    write_outputs(run_result.status, run_result.results, output_path=output_path, stream=rt.stdout)
    return 0


def cmd_render(args: argparse.Namespace, rt: _Runtime) -> int:
    ctx = RunContext.new(sink=workflow_sink(rt.stdout))
    try:
        changeset = ChangesetFile.from_path(Path(os.path.abspath(args.file)))
        variables = parse_variables(args.variables)
        rendered = inject_text(changeset.read_text(), changeset.format, variables)
    except (ChangesetException, ConfigError, OSError) as e:
        return _fail(ctx, e)

    rt.stdout.write(rendered if rendered.endswith("\n") else rendered + "\n")
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="inprod-changesets",
        description="Validate and execute InProd changesets",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Validate and/or execute changeset files")
    run.add_argument("--changeset-file", default=None, help="Path or glob pattern")
    run.add_argument("--base-url", default=None)
    run.add_argument("--environment", default=None, help="Environment id or name")
    run.add_argument(
        "--validate-before-execute",
        choices=("true", "false"),
        default=None,
    )
    run.add_argument("--validate-only", action="store_const", const="true", default=None)
    run.add_argument("--fail-fast", action="store_const", const="true", default=None)
    run.add_argument("--polling-timeout-minutes", default=None)
    run.add_argument(
        "--execution-strategy",
        default=None,
        help="per_file (default) or validate_first",
    )
    run.add_argument("--variables", default=None, help="KEY=VALUE lines")
    run.add_argument("--config", default=None, help="YAML or JSON config file")
    run.set_defaults(func=cmd_run)

    render = sub.add_parser("render", help="Print a changeset after variable injection")
    render.add_argument("file")
    render.add_argument("--variables", default=None, help="KEY=VALUE lines")
    render.set_defaults(func=cmd_render)

    return parser


def main(
    argv: Optional[List[str]] = None,
    *,
    environ: Optional[Mapping[str, str]] = None,
    stdout: Optional[TextIO] = None,
    transport: Optional[httpx.BaseTransport] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    rt = _Runtime(
        environ=os.environ if environ is None else environ,
        stdout=sys.stdout if stdout is None else stdout,
        transport=transport,
        sleep=sleep,
    )
    return args.func(args, rt)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
