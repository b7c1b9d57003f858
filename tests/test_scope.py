"""Tests for warnscope.scope: mutators, the push/pop stack and copy-on-descend."""

import warnings

import pytest

from warnscope.errors import ScopeDelimiterError, WarningStackUnderflow
from warnscope.flag_data import BASE_WARNING_FLAGS, Platform
from warnscope.scope import (
    EXPLICIT_DISABLE,
    TargetOptions,
    WarningScope,
    split_explicit_disable,
)

# ---------------------------------------------------------------------------
# split_explicit_disable()
# ---------------------------------------------------------------------------


class TestSplitExplicitDisable:
    def test_no_sentinel(self) -> None:
        assert split_explicit_disable(["-Wa", "-Wb"]) == (["-Wa", "-Wb"], [])

    def test_sentinel_splits(self) -> None:
        assert split_explicit_disable(["-Wa", EXPLICIT_DISABLE, "-Wno-b"]) == (["-Wa"], ["-Wno-b"])

    def test_later_sentinels_are_dropped(self) -> None:
        args = ["-Wa", EXPLICIT_DISABLE, "-Wno-b", EXPLICIT_DISABLE, "-Wno-c"]
        assert split_explicit_disable(args) == (["-Wa"], ["-Wno-b", "-Wno-c"])

    def test_sentinel_only(self) -> None:
        assert split_explicit_disable([EXPLICIT_DISABLE]) == ([], [])


# ---------------------------------------------------------------------------
# remove_warnings()
# ---------------------------------------------------------------------------


class TestRemoveWarnings:
    def test_removes_listed_flags(self) -> None:
        ws = WarningScope("-Wall -Wextra -Wconversion")
        ws.remove_warnings("-Wall", "-Wextra")
        assert str(ws.flags) == "-Wconversion"

    def test_explicit_disable_appends_after_pruning(self) -> None:
        ws = WarningScope("-Wall -Wextra")
        ws.remove_warnings("-Wall", EXPLICIT_DISABLE, "-Wno-shadow")
        assert str(ws.flags) == "-Wextra -Wno-shadow"

    def test_keyword_form_matches_positional_form(self) -> None:
        a = WarningScope("-Wall -Wextra -Wshadow")
        b = WarningScope("-Wall -Wextra -Wshadow")
        a.remove_warnings("-Wshadow", EXPLICIT_DISABLE, "-Wno-shadow", "-Wno-vla")
        b.remove_warnings("-Wshadow", explicit_disable=["-Wno-shadow", "-Wno-vla"])
        assert a.flags == b.flags

    def test_mixing_forms_is_rejected(self) -> None:
        ws = WarningScope("-Wall")
        with pytest.raises(ValueError, match="not both"):
            ws.remove_warnings("-Wall", EXPLICIT_DISABLE, "-Wno-a", explicit_disable=["-Wno-b"])
        assert str(ws.flags) == "-Wall"

    def test_absent_flag_is_noop(self) -> None:
        ws = WarningScope("-Wall -Wextra")
        ws.remove_warnings("-Wshadow")
        assert str(ws.flags) == "-Wall -Wextra"

    def test_removes_every_occurrence(self) -> None:
        ws = WarningScope("-Wall -Wextra -Wall")
        ws.remove_warnings("-Wall")
        assert str(ws.flags) == "-Wextra"

    def test_readded_flag_survives_its_own_removal(self) -> None:
        ws = WarningScope("-Wshadow -Wall")
        ws.remove_warnings("-Wshadow", EXPLICIT_DISABLE, "-Wshadow")
        assert str(ws.flags) == "-Wall -Wshadow"

    def test_readd_even_if_never_present(self) -> None:
        ws = WarningScope("")
        ws.remove_warnings(EXPLICIT_DISABLE, "-Wno-unused")
        assert str(ws.flags) == "-Wno-unused"

    def test_removal_order_does_not_matter(self) -> None:
        a = WarningScope("-Wa -Wb -Wc -Wa")
        b = WarningScope("-Wa -Wb -Wc -Wa")
        a.remove_warnings("-Wa", "-Wb")
        b.remove_warnings("-Wb")
        b.remove_warnings("-Wa")
        assert a.flags == b.flags == "-Wc"

    def test_does_not_touch_target_options(self) -> None:
        sink = TargetOptions()
        ws = WarningScope("-Wall", sink=sink)
        ws.remove_warnings("-Wall")
        assert sink.options == {}


# ---------------------------------------------------------------------------
# remove_all_warnings()
# ---------------------------------------------------------------------------


class TestRemoveAllWarnings:
    def test_gcc_style(self) -> None:
        ws = WarningScope("-Wall -Wextra")
        ws.remove_all_warnings()
        assert str(ws.flags) == "-w"

    def test_msvc_style(self) -> None:
        ws = WarningScope("/W3 -W4", msvc=True)
        ws.remove_all_warnings()
        assert str(ws.flags) == "/w"

    def test_keeps_non_warning_flags(self) -> None:
        ws = WarningScope("-O2 -Wall -fPIC -Wno-shadow")
        ws.remove_all_warnings()
        assert str(ws.flags) == "-O2 -fPIC -w"

    def test_idempotent(self) -> None:
        ws = WarningScope("-Wall -Wextra -O2")
        ws.remove_all_warnings()
        first = ws.flags.copy()
        ws.remove_all_warnings()
        assert ws.flags == first
        assert ws.flags.tokens.count("-w") == 1

    def test_suppressor_is_last(self) -> None:
        ws = WarningScope("-w -Wall")
        ws.remove_all_warnings()
        assert ws.flags.tokens[-1] == "-w"
        assert len(ws.flags) == 1

    def test_empty_flags(self) -> None:
        ws = WarningScope()
        ws.remove_all_warnings()
        assert str(ws.flags) == "-w"


# ---------------------------------------------------------------------------
# remove_all_warnings_from_targets()
# ---------------------------------------------------------------------------


class TestRemoveAllWarningsFromTargets:
    def test_attaches_private_suppressor(self) -> None:
        sink = TargetOptions()
        ws = WarningScope("-Wall -Wextra", sink=sink)
        ws.remove_all_warnings_from_targets("zlib", "png")
        assert sink.get("zlib") == ["-w"]
        assert sink.get("png") == ["-w"]
        assert str(ws.flags) == "-Wall -Wextra"

    def test_msvc_suppressor(self) -> None:
        sink = TargetOptions()
        ws = WarningScope("/W3", msvc=True, sink=sink)
        ws.remove_all_warnings_from_targets("zlib")
        assert sink.get("zlib") == ["/w"]

    def test_no_targets(self) -> None:
        sink = TargetOptions()
        WarningScope("-Wall", sink=sink).remove_all_warnings_from_targets()
        assert sink.options == {}

    def test_unknown_target_in_default_sink(self) -> None:
        assert TargetOptions().get("nope") == []


# ---------------------------------------------------------------------------
# push_warnings() / pop_warnings()
# ---------------------------------------------------------------------------


class TestStack:
    def test_round_trip(self) -> None:
        ws = WarningScope("-Wall -Wextra")
        ws.push_warnings()
        ws.pop_warnings()
        assert str(ws.flags) == "-Wall -Wextra"
        assert ws.depth == 0

    def test_restores_after_mutation(self) -> None:
        ws = WarningScope("-Wall -Wextra")
        ws.push_warnings()
        ws.remove_all_warnings()
        assert str(ws.flags) == "-w"
        restored = ws.pop_warnings()
        assert str(ws.flags) == "-Wall -Wextra"
        assert restored == "-Wall -Wextra"

    def test_lifo(self) -> None:
        ws = WarningScope("-Wa")
        ws.push_warnings()
        ws.flags.append("-Wb")
        ws.push_warnings()
        ws.flags.append("-Wc")
        assert ws.depth == 2
        ws.pop_warnings()
        assert str(ws.flags) == "-Wa -Wb"
        ws.pop_warnings()
        assert str(ws.flags) == "-Wa"

    def test_empty_pop_warns_and_keeps_flags(self) -> None:
        ws = WarningScope("-Wall")
        with pytest.warns(WarningStackUnderflow, match="nothing is in the warnings stack"):
            result = ws.pop_warnings()
        assert result is None
        assert str(ws.flags) == "-Wall"

    def test_repeated_empty_pops_leave_flags(self) -> None:
        ws = WarningScope("-Wall")
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", WarningStackUnderflow)
            ws.pop_warnings()
            ws.pop_warnings()
        assert str(ws.flags) == "-Wall"

    def test_push_rejects_scope_delimiter(self) -> None:
        ws = WarningScope("-Wall -DLIST=a;b")
        with pytest.raises(ScopeDelimiterError, match="-DLIST=a;b"):
            ws.push_warnings()
        assert ws.depth == 0

    def test_snapshot_is_not_aliased(self) -> None:
        ws = WarningScope("-Wall")
        ws.push_warnings()
        ws.flags.append("-Wextra")
        assert ws.stack == (("-Wall",),)

    def test_context_manager(self) -> None:
        ws = WarningScope("-Wall -Wshadow")
        with ws.push():
            ws.remove_warnings("-Wshadow")
            assert str(ws.flags) == "-Wall"
        assert str(ws.flags) == "-Wall -Wshadow"
        assert ws.depth == 0

    def test_context_manager_restores_on_error(self) -> None:
        ws = WarningScope("-Wall")
        with pytest.raises(RuntimeError), ws.push():
            ws.remove_all_warnings()
            raise RuntimeError("boom")
        assert str(ws.flags) == "-Wall"


# ---------------------------------------------------------------------------
# child()
# ---------------------------------------------------------------------------


class TestChild:
    def test_child_changes_do_not_reach_parent(self) -> None:
        parent = WarningScope("-Wall -Wextra")
        parent.push_warnings()
        kid = parent.child()
        kid.remove_all_warnings()
        kid.pop_warnings()
        kid.push_warnings()
        assert str(parent.flags) == "-Wall -Wextra"
        assert parent.depth == 1

    def test_child_inherits_stack(self) -> None:
        parent = WarningScope("-Wa")
        parent.push_warnings()
        parent.flags.append("-Wb")
        kid = parent.child()
        kid.pop_warnings()
        assert str(kid.flags) == "-Wa"
        assert str(parent.flags) == "-Wa -Wb"

    def test_child_shares_sink_and_style(self) -> None:
        sink = TargetOptions()
        kid = WarningScope("/W3", msvc=True, sink=sink).child()
        kid.remove_all_warnings_from_targets("t")
        assert sink.get("t") == ["/w"]


# ---------------------------------------------------------------------------
# from_probe()
# ---------------------------------------------------------------------------


class TestFromProbe:
    def test_keeps_supported_in_candidate_order(self) -> None:
        supported = {"-Wshadow", "-Wextra", "-Wall"}
        ws = WarningScope.from_probe(lambda f: f in supported, platform=Platform.UNIX)
        assert ws.flags.tokens == ("-Wextra", "-Wshadow", "-Wall")

    def test_windows_tail(self) -> None:
        ws = WarningScope.from_probe(lambda f: f in {"-W3", "-Wall"}, platform=Platform.WINDOWS)
        assert str(ws.flags) == "-W3"
        assert ws.msvc is True

    def test_nothing_supported(self) -> None:
        ws = WarningScope.from_probe(lambda f: False, platform=Platform.UNIX)
        assert str(ws.flags) == ""

    def test_extra_flags_after_tail(self) -> None:
        ws = WarningScope.from_probe(
            lambda f: True, platform=Platform.UNIX, extra_flags=["-Wnull-dereference"]
        )
        assert ws.flags.tokens[-2:] == ("-Wall", "-Wnull-dereference")
        assert len(ws.flags) == len(BASE_WARNING_FLAGS) + 2

    def test_msvc_taken_from_probe(self) -> None:
        class _Probe:
            msvc = True

            def __call__(self, flag: str) -> bool:
                return True

        ws = WarningScope.from_probe(_Probe(), platform=Platform.UNIX)
        ws.remove_all_warnings()
        assert str(ws.flags) == "/w"
