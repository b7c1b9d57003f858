"""WarningScope: warning-flag state of one build-configuration scope.

A WarningScope owns the active FlagString and the push/pop stack of saved
snapshots for the scope being configured.  It is passed explicitly through
the scope traversal; a subdirectory gets its own copy via :meth:`child`,
mutates that copy, and nothing flows back to the parent.

Operations::

    scope = WarningScope.from_probe(CompilerProbe("gcc"))
    scope.remove_warnings("-Wshadow", EXPLICIT_DISABLE, "-Wno-shadow")
    with scope.push():
        scope.remove_all_warnings()
        ...                       # flags restored on exit
    scope.remove_all_warnings_from_targets("zlib")

Because precedence is positional, :meth:`remove_all_warnings` only
guarantees silence if no warning flag is appended after it in the scope.
"""

from __future__ import annotations

import warnings
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Protocol

from warnscope.errors import ScopeDelimiterError, WarningStackUnderflow
from warnscope.flag_data import (
    SUPPRESS_FLAGS,
    WARNING_PREFIXES,
    Platform,
    candidate_flags,
    detect_platform,
    suppress_flag,
)
from warnscope.flags import FlagString
from warnscope.probe import Probe, initial_flags

# Positional marker splitting removal tokens from re-added tokens.
EXPLICIT_DISABLE = "EXPLICIT_DISABLE"

# List separator of the scope mechanism; may not appear inside a saved token.
SCOPE_DELIMITER = ";"


class OptionSink(Protocol):
    """Receives private compile options for one named build target."""

    def attach_options(self, target: str, options: list[str]) -> None: ...


@dataclass
class TargetOptions:
    """In-memory OptionSink: target name -> private options, in attach order."""

    options: dict[str, list[str]] = field(default_factory=dict)

    def attach_options(self, target: str, options: list[str]) -> None:
        self.options.setdefault(target, []).extend(options)

    def get(self, target: str) -> list[str]:
        return list(self.options.get(target, []))


def split_explicit_disable(tokens: Iterable[str]) -> tuple[list[str], list[str]]:
    """Split a ``remove_warnings`` argument list at the first EXPLICIT_DISABLE.

    Returns ``(removals, re_adds)``.  Sentinels after the first one are
    dropped.
    """
    removals: list[str] = []
    re_adds: list[str] = []
    in_explicit_disable = False
    for token in tokens:
        if token == EXPLICIT_DISABLE:
            in_explicit_disable = True
        elif in_explicit_disable:
            re_adds.append(token)
        else:
            removals.append(token)
    return removals, re_adds


class WarningScope:
    """Active warning flags plus the snapshot stack for one scope."""

    def __init__(
        self,
        flags: str | Iterable[str] | FlagString = (),
        *,
        msvc: bool = False,
        sink: OptionSink | None = None,
    ) -> None:
        self.flags = flags.copy() if isinstance(flags, FlagString) else FlagString(flags)
        self.msvc = msvc
        self.sink: OptionSink = sink if sink is not None else TargetOptions()
        self._stack: list[tuple[str, ...]] = []

    @classmethod
    def from_probe(
        cls,
        probe: Probe,
        *,
        platform: Platform | None = None,
        msvc: bool | None = None,
        extra_flags: Iterable[str] = (),
        jobs: int = 1,
        sink: OptionSink | None = None,
    ) -> WarningScope:
        """Initialise the root scope from compiler probing.

        The candidate list is chosen once for *platform*; the suppressor
        style follows the probe's compiler when it knows it.
        """
        if platform is None:
            platform = detect_platform()
        if msvc is None:
            msvc = getattr(probe, "msvc", platform is Platform.WINDOWS)
        flags = initial_flags(candidate_flags(platform, tuple(extra_flags)), probe, jobs=jobs)
        return cls(flags, msvc=bool(msvc), sink=sink)

    def __repr__(self) -> str:
        return f"WarningScope({str(self.flags)!r}, depth={self.depth})"

    @property
    def depth(self) -> int:
        """Number of saved snapshots on the stack."""
        return len(self._stack)

    @property
    def stack(self) -> tuple[tuple[str, ...], ...]:
        return tuple(self._stack)

    def child(self) -> WarningScope:
        """Independent copy for a subdirectory: same flags, stack and sink."""
        dup = WarningScope(self.flags, msvc=self.msvc, sink=self.sink)
        dup._stack = list(self._stack)
        return dup

    # -- mutators ---------------------------------------------------------

    def remove_warnings(self, *tokens: str, explicit_disable: Iterable[str] | None = None) -> None:
        """Drop the given warning flags; optionally append explicit disables.

        Positional form: tokens after ``EXPLICIT_DISABLE`` are appended, e.g.
        ``remove_warnings("-Wall", EXPLICIT_DISABLE, "-Wno-shadow")``.  The
        same re-adds may be given as ``explicit_disable=[...]`` instead, but
        not both ways in one call.

        Every occurrence of each removal token is deleted first, then all
        re-added tokens are appended once, in order.
        """
        removals, re_adds = split_explicit_disable(tokens)
        if explicit_disable is not None:
            if EXPLICIT_DISABLE in tokens:
                raise ValueError(
                    "remove_warnings: pass re-added flags either after EXPLICIT_DISABLE "
                    "or as explicit_disable=, not both"
                )
            re_adds = list(explicit_disable)
        self.flags.remove(removals)
        if re_adds:
            self.flags.append(re_adds)

    def remove_all_warnings(self) -> None:
        """Strip every ``-W``/``/W`` flag and end with one blanket suppressor."""
        self.flags.remove_prefixed(WARNING_PREFIXES)
        self.flags.remove(SUPPRESS_FLAGS)
        self.flags.append(suppress_flag(self.msvc))

    def remove_all_warnings_from_targets(self, *targets: str) -> None:
        """Silence warnings for the named targets only; the FlagString is untouched."""
        for target in targets:
            self.sink.attach_options(target, [suppress_flag(self.msvc)])

    # -- stack ------------------------------------------------------------

    def push_warnings(self) -> None:
        """Save the current flags on top of the stack.

        Raises:
            ScopeDelimiterError: a token contains the scope delimiter.
        """
        bad = [t for t in self.flags if SCOPE_DELIMITER in t]
        if bad:
            raise ScopeDelimiterError(
                f"Cannot push_warnings, flags contain {SCOPE_DELIMITER!r}: {' '.join(bad)}"
            )
        self._stack.append(self.flags.tokens)

    def pop_warnings(self) -> FlagString | None:
        """Restore the flags saved by the matching :meth:`push_warnings`.

        On an empty stack a :class:`WarningStackUnderflow` warning is issued
        and the flags stay as they are.
        """
        if not self._stack:
            warnings.warn(
                "pop_warnings called when nothing is in the warnings stack, must be an extra call",
                WarningStackUnderflow,
                stacklevel=2,
            )
            return None
        self.flags.replace(self._stack.pop())
        return self.flags.copy()

    @contextmanager
    def push(self) -> Iterator[WarningScope]:
        """``push_warnings()`` on entry, ``pop_warnings()`` on exit."""
        self.push_warnings()
        try:
            yield self
        finally:
            self.pop_warnings()
