"""warnscope cache: Manage the probe result cache."""

from pathlib import Path

import typer

from warnscope.cli import ConfigOption, get_config
from warnscope.probe_cache import ProbeCache

app = typer.Typer(
    help="Manage the probe result cache (.warnscope/probe_cache/).",
    rich_markup_mode="rich",
    epilog="""\
[bold]Examples:[/bold]

warnscope cache stats        Show cache size and entry count

warnscope cache clear        Forget all probe results

[dim]Probe results are keyed by (compiler command + flag).  Clear the cache
after upgrading the compiler in place.[/dim]""",
)


def _cache_dir(config: Path | None) -> Path:
    try:
        cfg = get_config(config, required=False)
    except (FileNotFoundError, KeyError, ValueError) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc
    return cfg.cache_dir


@app.command()
def stats(config: Path | None = ConfigOption) -> None:
    """Show probe cache statistics."""
    cache_dir = _cache_dir(config)
    if not cache_dir.exists():
        typer.echo("No probe cache found (not yet created).")
        return

    cache = ProbeCache(cache_dir)
    try:
        info = cache.stats()
        typer.echo(f"Cache directory: {cache_dir}")
        typer.echo(f"Entries:         {info['entries']}")
        typer.echo(f"Disk usage:      {info['volume_mb']} MB")
        typer.echo(f"Size limit:      {info['size_limit_mb']} MB")
    finally:
        cache.close()


@app.command()
def clear(config: Path | None = ConfigOption) -> None:
    """Delete all cached probe results."""
    cache_dir = _cache_dir(config)
    if not cache_dir.exists():
        typer.echo("No probe cache found (nothing to clear).")
        return

    cache = ProbeCache(cache_dir)
    try:
        count = cache.count
        cache.clear()
        typer.echo(f"Cleared {count} cached probe results from {cache_dir}")
    finally:
        cache.close()
