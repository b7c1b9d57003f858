"""main.py – Umbrella CLI entry point for warnscope.

Imports and registers the subcommand typer apps.  Single-command modules
are registered as flat ``app.command()`` entries; multi-command modules
(currently only ``cache``) use ``add_typer()``.
"""

import importlib

import typer

app = typer.Typer(
    help="Scoped compiler warning-flag management.",
    rich_markup_mode="rich",
    no_args_is_help=True,
    epilog="""\
[bold]Typical workflow:[/bold]
  warnscope candidates         List the warning flags that will be probed
  warnscope probe              Check which of them the compiler accepts
  warnscope configure          Run the scope tree, print per-target flags

[dim]All subcommands read project settings from warnscope.toml.
Run 'warnscope <cmd> --help' for details.[/dim]""",
)

# ---------------------------------------------------------------------------
# Subcommand registry
# ---------------------------------------------------------------------------

# (command name, module, typer app attribute, command function, help)
_SINGLE_COMMANDS: list[tuple[str, str, str, str, str]] = [
    ("probe", "warnscope.probe_cli", "app", "main", "Probe the compiler for supported warning flags."),
    (
        "candidates",
        "warnscope.probe_cli",
        "candidates_app",
        "candidates_main",
        "List the candidate warning flags.",
    ),
    ("configure", "warnscope.configure", "app", "main", "Run the scope tree and print target flags."),
]

# Multi-command modules – registered as groups via app.add_typer().
_MULTI_COMMANDS: list[tuple[str, str, str]] = [
    ("cache", "warnscope.cache_cli", "Manage the probe result cache."),
]


for _name, _module, _app_attr, _func_attr, _help in _SINGLE_COMMANDS:
    _mod = importlib.import_module(_module)
    _epilog = getattr(getattr(_mod, _app_attr).info, "epilog", None)
    if not isinstance(_epilog, str):
        _epilog = None
    app.command(name=_name, help=_help, epilog=_epilog)(getattr(_mod, _func_attr))

for _name, _module, _help in _MULTI_COMMANDS:
    _mod = importlib.import_module(_module)
    app.add_typer(_mod.app, name=_name, help=_help)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
