"""probe.py – Ask the active C compiler which warning flags it accepts.

A flag is "supported" when a trivial translation unit compiles with it and
the compiler does not complain about the option on the way.  Many drivers
exit 0 on unknown options and only print a diagnostic, so the combined
output is checked against the usual "unknown option" messages as well.

Nothing here raises for an unsupported flag or a broken compiler: every
failure to launch or finish the compile is a plain ``False``.
"""

from __future__ import annotations

import re
import shlex
import subprocess
import tempfile
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from warnscope.flag_data import is_msvc_driver
from warnscope.flags import FlagString
from warnscope.probe_cache import ProbeCache, probe_cache_key

Probe = Callable[[str], bool]

_PROBE_SOURCE = "int main(void) { return 0; }\n"

# Diagnostics meaning "I ignored your option" from drivers that still exit 0.
_FAIL_RE = re.compile(
    "|".join(
        [
            r"[Uu]nrecogni[sz]ed .*option",  # GNU
            r"switch .* is no longer supported",  # GNU
            r"command[- ]line option .* is valid for .* but not for C",  # GNU
            r"unknown .*option",  # Clang
            r"unknown warning option",  # Clang
            r"unknown argument ignored",  # clang-cl
            r"ignoring unknown option",  # MSVC, Intel
            r"warning D9002",  # MSVC
            r"option.*not supported",  # Intel
            r"invalid argument .*option",  # Intel
            r"ignoring option .*argument",  # Intel
            r"[Uu]nknown option",  # HP
            r"[Ww]arning: [Oo]ption",  # SunPro
            r"command option .* is not recognized",  # XL
            r"[Uu]nknown switch",  # PGI
            r"WARNING: unknown flag:",  # Open64
            r"Incorrect command line option:",  # Borland
            r"Warning: illegal option",  # SunStudio
        ]
    )
)


def split_command(compiler: str | list[str]) -> list[str]:
    """Split a compiler command string (``"ccache gcc -m32"``) into argv parts."""
    if isinstance(compiler, str):
        try:
            return shlex.split(compiler)
        except ValueError:
            return compiler.split()
    return list(compiler)


def _probe_command(compiler: list[str], flag: str, msvc: bool) -> list[str]:
    if msvc:
        return [*compiler, "/nologo", flag, "/c", "probe.c", "/Foprobe.obj"]
    return [*compiler, flag, "-c", "probe.c", "-o", "probe.o"]


def compiler_accepts(
    flag: str,
    compiler: str | list[str],
    *,
    msvc: bool | None = None,
    timeout: int = 30,
) -> bool:
    """Return whether *compiler* accepts *flag*.

    Each call compiles in a fresh temporary directory, so probes do not
    influence each other.

    Args:
        flag: The candidate flag token, e.g. ``-Wshadow``.
        compiler: Compiler command, string or argv list.
        msvc: Use ``cl``-style switches; guessed from the driver name if ``None``.
        timeout: Seconds before the compile is abandoned (counts as unsupported).
    """
    cmd_parts = split_command(compiler)
    if not cmd_parts:
        return False
    if msvc is None:
        msvc = is_msvc_driver(cmd_parts)

    cmd = _probe_command(cmd_parts, flag, msvc)
    try:
        with tempfile.TemporaryDirectory(prefix="warnscope_probe_") as _td:
            workdir = Path(_td)
            (workdir / "probe.c").write_text(_PROBE_SOURCE, encoding="utf-8")
            r = subprocess.run(cmd, capture_output=True, cwd=workdir, timeout=timeout)
    except subprocess.TimeoutExpired:
        return False
    except (OSError, ValueError):
        return False

    if r.returncode != 0:
        return False
    output = (r.stdout + r.stderr).decode(errors="replace")
    return _FAIL_RE.search(output) is None


class CompilerProbe:
    """Callable ``probe(flag) -> bool`` bound to one compiler.

    Example:
        >>> probe = CompilerProbe("gcc")
        >>> probe("-Wshadow")
        True
    """

    def __init__(
        self,
        compiler: str | list[str],
        *,
        msvc: bool | None = None,
        timeout: int = 30,
        cache: ProbeCache | None = None,
    ) -> None:
        self.compiler = split_command(compiler)
        self.msvc = is_msvc_driver(self.compiler) if msvc is None else msvc
        self.timeout = timeout
        self.cache = cache

    def __call__(self, flag: str) -> bool:
        key: str | None = None
        if self.cache is not None:
            key = probe_cache_key(self.compiler, flag, self.msvc)
            cached = self.cache.get(key)
            if cached is not None:
                return cached

        supported = compiler_accepts(flag, self.compiler, msvc=self.msvc, timeout=self.timeout)

        if self.cache is not None and key is not None:
            self.cache.put(key, supported)
        return supported

    def __repr__(self) -> str:
        return f"CompilerProbe({' '.join(self.compiler)!r}, msvc={self.msvc})"


def probe_flags(candidates: Iterable[str], probe: Probe, *, jobs: int = 1) -> dict[str, bool]:
    """Build the support table for *candidates*, in candidate order.

    With ``jobs > 1`` the probes run in a thread pool; the table is still
    ordered like the candidate list.  A repeated candidate is probed once.
    """
    unique = list(dict.fromkeys(candidates))
    if jobs <= 1 or len(unique) <= 1:
        return {flag: bool(probe(flag)) for flag in unique}

    with ThreadPoolExecutor(max_workers=jobs) as executor:
        verdicts = list(executor.map(probe, unique))
    return {flag: bool(ok) for flag, ok in zip(unique, verdicts)}


def initial_flags(candidates: Iterable[str], probe: Probe, *, jobs: int = 1) -> FlagString:
    """Probe *candidates* and return the supported ones as a FlagString.

    Unsupported flags are skipped; an empty result is a valid outcome.
    A candidate listed twice is appended twice.
    """
    candidates = list(candidates)
    table = probe_flags(candidates, probe, jobs=jobs)
    return FlagString(flag for flag in candidates if table[flag])
