"""probe_cli.py – Show which candidate warning flags the compiler accepts.

Usage::

    warnscope probe
    warnscope probe --compiler clang --jobs 8
    warnscope probe --platform windows --compiler "wine cl.exe" --json
    warnscope candidates --platform unix
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
)
from warnscope.flag_data import candidate_flags
from warnscope.probe import probe_flags

_EPILOG = """\
[bold]Examples:[/bold]

warnscope probe                          Probe with the configured compiler

warnscope probe --compiler clang -j 8    Probe clang, 8 compiles at a time

warnscope probe --no-cache --json        Re-probe everything, JSON output

[dim]Each flag is tested by compiling a trivial C file with it.  Results are
remembered in .warnscope/probe_cache/ unless --no-cache is given.[/dim]"""

app = typer.Typer(
    help="Probe the compiler for supported warning flags.",
    rich_markup_mode="rich",
    epilog=_EPILOG,
)


@app.callback(invoke_without_command=True)
def main(
    config: Path | None = ConfigOption,
    compiler: str | None = CompilerOption,
    platform: str | None = PlatformOption,
    jobs: int | None = typer.Option(None, "--jobs", "-j", min=1, help="Parallel probes"),
    no_cache: bool = typer.Option(False, "--no-cache", help="Ignore and do not update the probe cache"),
    json_output: bool = JsonOption,
) -> None:
    """Probe every candidate flag and print the resulting flag string."""
    try:
        cfg = apply_overrides(
            get_config(config, required=False), compiler=compiler, platform=platform
        )
    except (FileNotFoundError, KeyError, ValueError) as exc:
        error_exit(str(exc), json_mode=json_output)

    probe = make_probe(cfg, use_cache=not no_cache)
    candidates = candidate_flags(cfg.platform, cfg.extra_flags)
    table = probe_flags(candidates, probe, jobs=jobs or cfg.probe_jobs)
    flags = " ".join(f for f in candidates if table[f])

    if json_output:
        json_print(
            {
                "compiler": cfg.compiler_command,
                "platform": cfg.platform.value,
                "supported": [f for f, ok in table.items() if ok],
                "unsupported": [f for f, ok in table.items() if not ok],
                "flags": flags,
            }
        )
        return

    console = Console()
    tbl = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
    tbl.add_column("Flag")
    tbl.add_column("Supported")
    for flag, ok in table.items():
        tbl.add_row(flag, "[green]yes[/green]" if ok else "[dim]no[/dim]")
    console.print(tbl)
    supported = sum(1 for ok in table.values() if ok)
    console.print(
        f"\n[bold]{supported}/{len(table)}[/bold] flags supported by "
        f"{' '.join(cfg.compiler_command)}",
        highlight=False,
    )
    typer.echo(flags)


candidates_app = typer.Typer(help="List the candidate warning flags.", rich_markup_mode="rich")


@candidates_app.callback(invoke_without_command=True)
def candidates_main(
    config: Path | None = ConfigOption,
    platform: str | None = PlatformOption,
    json_output: bool = JsonOption,
) -> None:
    """List the candidate flags for the platform, in probe order."""
    try:
        cfg = apply_overrides(get_config(config, required=False), platform=platform)
    except (FileNotFoundError, KeyError, ValueError) as exc:
        error_exit(str(exc), json_mode=json_output)

    flags = candidate_flags(cfg.platform, cfg.extra_flags)
    if json_output:
        json_print({"platform": cfg.platform.value, "candidates": flags})
        return
    for flag in flags:
        typer.echo(flag)


def main_entry() -> None:
    """Run the Typer CLI application."""
    app()


if __name__ == "__main__":
    main_entry()
