"""configure.py – Resolve the final warning flags of every target.

Reads the ``[scopes]`` tree from warnscope.toml, initialises the flags by
probing the compiler (or from ``--flags``), runs every scope's steps and
prints what each target will be compiled with.

Usage::

    warnscope configure
    warnscope configure --flags "-Wall -Wextra -Wshadow"
    warnscope configure --config sub/warnscope.toml --json
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from warnscope.cli import (
    CompilerOption,
    ConfigOption,
    JsonOption,
    PlatformOption,
    apply_overrides,
    error_exit,
    get_config,
    json_print,
    make_probe,
    warn,
)
from warnscope.errors import WarnScopeError
from warnscope.scope import WarningScope
from warnscope.tree import ConfigureResult, configure

_EPILOG = """\
[bold]Examples:[/bold]

warnscope configure                         Probe, then run the scope tree

warnscope configure --flags "-Wall -Wextra"  Skip probing, start from these flags

warnscope configure --json                   Machine-readable output

[dim]Targets compile with the flags in effect at the end of the scope that
declares them; subdirectories inherit the flags in effect where they are added.[/dim]"""

app = typer.Typer(
    help="Run the scope tree and print each target's warning flags.",
    rich_markup_mode="rich",
    epilog=_EPILOG,
)


def _render(console: Console, result: ConfigureResult) -> None:
    tbl = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
    tbl.add_column("Target")
    tbl.add_column("Scope")
    tbl.add_column("Flags", overflow="fold")
    for t in result.targets:
        tbl.add_row(t.name, t.scope, " ".join(t.command_flags) or "[dim](none)[/dim]")
    console.print(tbl)


@app.callback(invoke_without_command=True)
def main(
    config: Path | None = ConfigOption,
    compiler: str | None = CompilerOption,
    platform: str | None = PlatformOption,
    flags: str | None = typer.Option(
        None, "--flags", help="Initial flag string; skips compiler probing."
    ),
    no_cache: bool = typer.Option(False, "--no-cache", help="Ignore the probe cache"),
    json_output: bool = JsonOption,
) -> None:
    """Configure all scopes and print the flags of every target."""
    try:
        cfg = apply_overrides(get_config(config), compiler=compiler, platform=platform)
    except (FileNotFoundError, KeyError, ValueError) as exc:
        error_exit(str(exc), json_mode=json_output)

    if flags is not None:
        root = WarningScope(flags, msvc=cfg.msvc)
    else:
        root = WarningScope.from_probe(
            make_probe(cfg, use_cache=not no_cache),
            platform=cfg.platform,
            msvc=cfg.msvc,
            extra_flags=cfg.extra_flags,
            jobs=cfg.probe_jobs,
        )

    try:
        result = configure(cfg.scopes, root, cfg.root_scope)
    except WarnScopeError as exc:
        error_exit(str(exc), json_mode=json_output)

    if json_output:
        json_print(result.to_dict())
        return

    for anomaly in result.anomalies:
        warn(f"scope '{anomaly.scope}', step {anomaly.step}: {anomaly.message}")
    _render(Console(), result)


def main_entry() -> None:
    """Run the Typer CLI application."""
    app()


if __name__ == "__main__":
    main_entry()
