"""tree.py – Run warning operations over a tree of build scopes.

A scope tree is a table of named scopes, each an ordered list of steps::

    [scopes.root]
    steps = [
      { target = "app" },
      { push_warnings = true },
      { remove_warnings = ["-Wshadow"], explicit_disable = ["-Wno-shadow"] },
      { subdirectory = "vendor" },
      { pop_warnings = true },
    ]

    [scopes.vendor]
    steps = [ { target = "zlib" }, { remove_all_warnings = true } ]

Traversal is depth-first in step order.  The rules mirror how a directory
based build system treats its flag variable:

- a ``subdirectory`` starts from a copy of the parent's flags and stack *at
  the step that adds it*; its changes never flow back;
- every ``target`` declared in a scope compiles with the flags in effect at
  the *end* of that scope, wherever in the scope it was declared;
- private options from ``remove_all_warnings_from_targets`` come after the
  scope flags on the target's command line.
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass, field
from typing import Any

from warnscope.errors import ScopeTreeError, UnknownTargetError, WarningStackUnderflow
from warnscope.scope import EXPLICIT_DISABLE, WarningScope

_BOOL_OPS = {"remove_all_warnings", "push_warnings", "pop_warnings"}
_NAME_OPS = {"target", "subdirectory"}
_LIST_OPS = {"remove_warnings", "remove_all_warnings_from_targets"}
_OPS = _BOOL_OPS | _NAME_OPS | _LIST_OPS


@dataclass(frozen=True)
class Step:
    """One operation inside a scope."""

    op: str
    args: tuple[str, ...] = ()
    explicit_disable: tuple[str, ...] | None = None


@dataclass(frozen=True)
class TargetFlags:
    """Final compile flags of one target."""

    name: str
    scope: str
    flags: tuple[str, ...]
    options: tuple[str, ...] = ()

    @property
    def command_flags(self) -> list[str]:
        """Scope flags followed by the target's private options."""
        return [*self.flags, *self.options]

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "scope": self.scope,
            "flags": " ".join(self.command_flags),
            "private_options": list(self.options),
        }


@dataclass(frozen=True)
class Anomaly:
    """A non-fatal authoring mistake found while configuring."""

    scope: str
    step: int
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {"scope": self.scope, "step": self.step, "message": self.message}


@dataclass
class ConfigureResult:
    """Outcome of one configure pass over the scope tree."""

    scopes: dict[str, tuple[str, ...]] = field(default_factory=dict)
    targets: list[TargetFlags] = field(default_factory=list)
    anomalies: list[Anomaly] = field(default_factory=list)

    def target(self, name: str) -> TargetFlags:
        for t in self.targets:
            if t.name == name:
                return t
        raise KeyError(name)

    def to_dict(self) -> dict[str, Any]:
        return {
            "scopes": {name: " ".join(flags) for name, flags in self.scopes.items()},
            "targets": [t.to_dict() for t in self.targets],
            "anomalies": [a.to_dict() for a in self.anomalies],
        }


class TargetRegistry:
    """OptionSink that only accepts targets declared earlier in the run."""

    def __init__(self) -> None:
        self.owner: dict[str, str] = {}
        self.private: dict[str, list[str]] = {}

    def declare(self, target: str, scope: str) -> None:
        if target in self.owner:
            raise ScopeTreeError(
                f"Target '{target}' declared in scope '{scope}' already exists "
                f"(declared in scope '{self.owner[target]}')"
            )
        self.owner[target] = scope
        self.private[target] = []

    def attach_options(self, target: str, options: list[str]) -> None:
        if target not in self.owner:
            raise UnknownTargetError(
                f"Cannot attach compile options to target '{target}' which is not "
                f"declared (yet) in this project"
            )
        self.private[target].extend(options)


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def _as_names(value: Any, where: str) -> tuple[str, ...]:
    if isinstance(value, str):
        return (value,)
    if isinstance(value, list) and all(isinstance(v, str) for v in value):
        return tuple(value)
    raise ScopeTreeError(f"{where}: expected a string or list of strings, got {value!r}")


def parse_step(raw: Any, scope: str, index: int) -> Step:
    """Validate one raw step table."""
    where = f"scopes.{scope}.steps[{index}]"
    if not isinstance(raw, dict):
        raise ScopeTreeError(f"{where}: step must be a table, got {raw!r}")
    keys = set(raw)
    ops = keys & _OPS
    if len(ops) != 1:
        raise ScopeTreeError(
            f"{where}: step needs exactly one operation of {sorted(_OPS)}, got {sorted(keys)}"
        )
    op = ops.pop()
    extra = keys - {op}
    if extra and not (op == "remove_warnings" and extra == {"explicit_disable"}):
        raise ScopeTreeError(f"{where}: unexpected keys {sorted(extra)} for '{op}'")

    value = raw[op]
    if op in _BOOL_OPS:
        if value is not True:
            raise ScopeTreeError(f"{where}: '{op}' must be true, got {value!r}")
        return Step(op)
    if op in _NAME_OPS:
        if not isinstance(value, str) or not value:
            raise ScopeTreeError(f"{where}: '{op}' must be a non-empty name, got {value!r}")
        return Step(op, (value,))

    args = _as_names(value, where)
    explicit = raw.get("explicit_disable")
    if explicit is not None and EXPLICIT_DISABLE in args:
        raise ScopeTreeError(
            f"{where}: give re-added flags after {EXPLICIT_DISABLE} or as explicit_disable, not both"
        )
    return Step(
        op,
        args,
        _as_names(explicit, f"{where}.explicit_disable") if explicit is not None else None,
    )


def parse_tree(scopes: dict[str, Any]) -> dict[str, list[Step]]:
    """Validate a ``[scopes]`` table into step lists."""
    tree: dict[str, list[Step]] = {}
    for name, body in scopes.items():
        if not isinstance(body, dict):
            raise ScopeTreeError(f"scopes.{name}: must be a table with a 'steps' list")
        raw_steps = body.get("steps", [])
        if not isinstance(raw_steps, list):
            raise ScopeTreeError(f"scopes.{name}.steps: must be a list of tables")
        tree[name] = [parse_step(s, name, i) for i, s in enumerate(raw_steps)]
    return tree


# ---------------------------------------------------------------------------
# Traversal
# ---------------------------------------------------------------------------


class _Traversal:
    def __init__(self, tree: dict[str, list[Step]]) -> None:
        self.tree = tree
        self.registry = TargetRegistry()
        self.result = ConfigureResult()
        self.visited: set[str] = set()

    def run(self, name: str, ws: WarningScope) -> None:
        if name not in self.tree:
            raise ScopeTreeError(f"Unknown scope '{name}'")
        if name in self.visited:
            raise ScopeTreeError(f"Scope '{name}' is added more than once")
        self.visited.add(name)

        declared: list[str] = []
        for index, step in enumerate(self.tree[name]):
            self._apply(name, index, step, ws, declared)

        final = ws.flags.tokens
        self.result.scopes[name] = final
        for target in declared:
            self.result.targets.append(TargetFlags(target, name, final))

    def _apply(
        self, name: str, index: int, step: Step, ws: WarningScope, declared: list[str]
    ) -> None:
        if step.op == "target":
            self.registry.declare(step.args[0], name)
            declared.append(step.args[0])
        elif step.op == "subdirectory":
            self.run(step.args[0], ws.child())
        elif step.op == "remove_warnings":
            ws.remove_warnings(*step.args, explicit_disable=step.explicit_disable)
        elif step.op == "remove_all_warnings":
            ws.remove_all_warnings()
        elif step.op == "remove_all_warnings_from_targets":
            ws.remove_all_warnings_from_targets(*step.args)
        elif step.op == "push_warnings":
            ws.push_warnings()
        elif step.op == "pop_warnings":
            with warnings.catch_warnings(record=True) as caught:
                warnings.simplefilter("always", WarningStackUnderflow)
                ws.pop_warnings()
            for w in caught:
                self.result.anomalies.append(Anomaly(name, index, str(w.message)))

    def finish(self) -> ConfigureResult:
        self.result.targets = [
            TargetFlags(t.name, t.scope, t.flags, tuple(self.registry.private[t.name]))
            for t in self.result.targets
        ]
        return self.result


def configure(
    tree: dict[str, list[Step]] | dict[str, Any],
    root: WarningScope,
    root_scope: str = "root",
) -> ConfigureResult:
    """Configure every scope reachable from *root_scope*.

    Args:
        tree: Parsed step lists, or the raw ``[scopes]`` table.
        root: Initial warning state; it is copied, not modified.
        root_scope: Name of the top-level scope.

    Raises:
        ScopeTreeError: unknown or repeated scope, malformed step, duplicate target.
        UnknownTargetError: options attached to an undeclared target.
        ScopeDelimiterError: ``push_warnings`` on flags holding the delimiter.
    """
    if not all(
        isinstance(steps, list) and all(isinstance(s, Step) for s in steps)
        for steps in tree.values()
    ):
        tree = parse_tree(tree)
    walk = _Traversal(tree)  # type: ignore[arg-type]
    ws = root.child()
    ws.sink = walk.registry
    walk.run(root_scope, ws)
    return walk.finish()
