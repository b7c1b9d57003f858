"""Project configuration loader for warnscope.

Reads ``warnscope.toml`` from the project root and exposes every setting as
plain attributes::

    from warnscope.config import load_config

    cfg = load_config()
    cfg.compiler_command      # ["cc"]
    cfg.platform              # Platform.UNIX
    cfg.probe_jobs            # 4
    cfg.scopes["root"]        # raw step list for the traversal engine

Layout::

    [compiler]
    command = "cc"
    platform = "auto"      # "auto" | "windows" | "unix"
    msvc = false           # optional, guessed from the driver name
    timeout = 30

    [probe]
    jobs = 4
    cache = true
    extra_flags = []

    [project]
    root_scope = "root"

    [scopes.root]
    steps = [ { target = "app" }, { subdirectory = "vendor" } ]
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import,no-redef]

from warnscope.flag_data import Platform, is_msvc_driver, parse_platform
from warnscope.probe import split_command
from warnscope.probe_cache import probe_cache_dir

CONFIG_NAME = "warnscope.toml"


@dataclass
class ProjectConfig:
    """Parsed project configuration with computed paths."""

    # Directory containing warnscope.toml
    root: Path

    # --- [compiler] ---
    compiler_command: list[str] = field(default_factory=lambda: ["cc"])
    platform: Platform = Platform.UNIX
    msvc: bool = False
    compile_timeout: int = 30

    # --- [probe] ---
    probe_jobs: int = 1
    probe_cache: bool = True
    extra_flags: list[str] = field(default_factory=list)

    # --- [project] / [scopes] ---
    root_scope: str = "root"
    scopes: dict[str, Any] = field(default_factory=dict)

    @property
    def cache_dir(self) -> Path:
        return probe_cache_dir(self.root)


def _resolve_command(root: Path, command: list[str]) -> list[str]:
    """Make a relative compiler path (``tools/bin/gcc``) absolute against *root*.

    Bare names such as ``cc`` are left for ``PATH`` lookup.
    """
    if not command:
        return command
    first = Path(command[0])
    if not first.is_absolute() and len(first.parts) > 1:
        return [str(root / first), *command[1:]]
    return command


def _find_root(start: Path | None = None) -> Path:
    """Walk up from *start* (or cwd) to find warnscope.toml, like ``git`` finds ``.git/``."""
    if start is not None:
        return start
    candidate = Path.cwd().resolve()
    while candidate != candidate.parent:
        if (candidate / CONFIG_NAME).exists():
            return candidate
        candidate = candidate.parent
    raise FileNotFoundError(
        f"Could not find {CONFIG_NAME} in any parent of the current directory. "
        f"Run warnscope from within a project that contains {CONFIG_NAME}."
    )


def _int_setting(section: dict[str, Any], key: str, default: int, where: str) -> int:
    value = section.get(key, default)
    if not isinstance(value, int) or isinstance(value, bool) or value < 1:
        raise ValueError(f"{where}.{key} must be a positive integer, got {value!r}")
    return value


def config_from_dict(raw: dict[str, Any], root: Path) -> ProjectConfig:
    """Build a ProjectConfig from an already-parsed TOML document."""
    compiler = raw.get("compiler", {})
    probe = raw.get("probe", {})
    project = raw.get("project", {})

    command = compiler.get("command", "cc")
    if not isinstance(command, (str, list)):
        raise ValueError(f"compiler.command must be a string or list, got {command!r}")
    cmd_parts = _resolve_command(root, split_command(command))
    if not cmd_parts:
        raise ValueError("compiler.command is empty")

    msvc = compiler.get("msvc")
    if msvc is None:
        msvc = is_msvc_driver(cmd_parts)

    extra = probe.get("extra_flags", [])
    if not isinstance(extra, list) or not all(isinstance(f, str) for f in extra):
        raise ValueError(f"probe.extra_flags must be a list of strings, got {extra!r}")

    scopes = raw.get("scopes", {})
    if not isinstance(scopes, dict):
        raise ValueError("[scopes] must be a table of scope names")

    return ProjectConfig(
        root=root,
        compiler_command=cmd_parts,
        platform=parse_platform(compiler.get("platform", "auto")),
        msvc=bool(msvc),
        compile_timeout=_int_setting(compiler, "timeout", 30, "compiler"),
        probe_jobs=_int_setting(probe, "jobs", 1, "probe"),
        probe_cache=bool(probe.get("cache", True)),
        extra_flags=list(extra),
        root_scope=str(project.get("root_scope", "root")),
        scopes=dict(scopes),
    )


def load_config(root: Path | None = None, path: Path | None = None) -> ProjectConfig:
    """Load warnscope.toml.

    Args:
        root: Project root directory.  Auto-detected if ``None``.
        path: Explicit config file; its directory becomes the root.
    """
    if path is not None:
        toml_path = path
        root = path.resolve().parent
    else:
        root = _find_root(root)
        toml_path = root / CONFIG_NAME
    if not toml_path.exists():
        raise FileNotFoundError(f"Config not found: {toml_path}")

    with open(toml_path, "rb") as f:
        raw = tomllib.load(f)

    return config_from_dict(raw, root)
