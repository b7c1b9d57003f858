"""Shared CLI utilities for warnscope commands.

Provides common Typer options, config-loading helpers, and standardised
output / error helpers so every command gets the same ``--config`` /
``--compiler`` handling, error reporting and JSON output.

Usage in a command module::

    import typer
    from warnscope.cli import ConfigOption, get_config, error_exit, json_print

    app = typer.Typer()

    @app.callback(invoke_without_command=True)
    def main(config: Path | None = ConfigOption) -> None:
        cfg = get_config(config)
        ...
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, NoReturn

import typer
from rich.console import Console
from rich.markup import escape

from warnscope.config import ProjectConfig, config_from_dict, load_config
from warnscope.flag_data import is_msvc_driver, parse_platform
from warnscope.probe import CompilerProbe, split_command
from warnscope.probe_cache import get_probe_cache

ConfigOption: Path | None = typer.Option(
    None,
    "--config",
    "-c",
    help="Path to warnscope.toml (default: search upward from the current directory).",
)

CompilerOption: str | None = typer.Option(
    None,
    "--compiler",
    help="Compiler command to probe, e.g. 'gcc' or 'wine cl.exe' (overrides [compiler] command).",
)

PlatformOption: str | None = typer.Option(
    None,
    "--platform",
    "-p",
    help="Platform family: auto, windows or unix (overrides [compiler] platform).",
)

JsonOption: bool = typer.Option(False, "--json", help="Output results as JSON")


def get_config(path: Path | None = None, *, required: bool = True) -> ProjectConfig:
    """Load the project config.

    With ``required=False`` a missing warnscope.toml yields the defaults,
    rooted at the current directory.
    """
    try:
        return load_config(path=path)
    except FileNotFoundError:
        if required or path is not None:
            raise
        return config_from_dict({}, Path.cwd())


def apply_overrides(
    cfg: ProjectConfig,
    *,
    compiler: str | None = None,
    platform: str | None = None,
) -> ProjectConfig:
    """Apply ``--compiler`` / ``--platform`` command-line overrides in place."""
    if compiler:
        cfg.compiler_command = split_command(compiler)
        cfg.msvc = is_msvc_driver(cfg.compiler_command)
    if platform:
        cfg.platform = parse_platform(platform)
    return cfg


def make_probe(cfg: ProjectConfig, *, use_cache: bool = True) -> CompilerProbe:
    """Build the compiler probe described by *cfg*."""
    cache = get_probe_cache(cfg.root) if use_cache and cfg.probe_cache else None
    return CompilerProbe(
        cfg.compiler_command,
        msvc=cfg.msvc,
        timeout=cfg.compile_timeout,
        cache=cache,
    )


# ---------------------------------------------------------------------------
# Standardised output helpers
# ---------------------------------------------------------------------------

_err_console = Console(stderr=True)


def error_exit(msg: str, *, json_mode: bool = False, code: int = 1) -> NoReturn:
    """Print *msg* as an error and ``raise typer.Exit(code)``."""
    if json_mode:
        print(json.dumps({"error": msg}, indent=2))
    else:
        _err_console.print(f"[red bold]error:[/red bold] {escape(msg)}", highlight=False)
    raise typer.Exit(code=code)


def warn(msg: str) -> None:
    """Report a non-fatal problem on stderr; the command carries on."""
    _err_console.print(f"[yellow bold]warning:[/yellow bold] {escape(msg)}", highlight=False)


def json_print(data: dict[str, Any] | list[Any]) -> None:
    """Print *data* as pretty-printed JSON to stdout."""
    print(json.dumps(data, indent=2))
