"""Tests for warnscope.flags: tokenizer and the ordered FlagString."""

from warnscope.flags import FlagString, tokenize

# ---------------------------------------------------------------------------
# tokenize()
# ---------------------------------------------------------------------------


class TestTokenize:
    def test_splits_on_any_whitespace(self) -> None:
        assert tokenize("-Wall \t-Wextra\n -Wshadow") == ["-Wall", "-Wextra", "-Wshadow"]

    def test_empty_string(self) -> None:
        assert tokenize("") == []
        assert tokenize("   ") == []

    def test_iterable_of_fragments(self) -> None:
        assert tokenize(["-Wall", "-Wa -Wb", ""]) == ["-Wall", "-Wa", "-Wb"]

    def test_regex_metacharacters_are_plain_text(self) -> None:
        assert tokenize("-Wformat=2 -W[x]+") == ["-Wformat=2", "-W[x]+"]


# ---------------------------------------------------------------------------
# FlagString
# ---------------------------------------------------------------------------


class TestFlagString:
    def test_str_joins_with_single_spaces(self) -> None:
        assert str(FlagString("  -Wall   -Wextra ")) == "-Wall -Wextra"

    def test_empty(self) -> None:
        fs = FlagString()
        assert str(fs) == ""
        assert len(fs) == 0

    def test_equality_with_string_and_flagstring(self) -> None:
        fs = FlagString("-Wall -Wextra")
        assert fs == "-Wall  -Wextra"
        assert fs == FlagString(["-Wall", "-Wextra"])
        assert fs != "-Wextra -Wall"

    def test_append_preserves_order(self) -> None:
        fs = FlagString("-Wall")
        fs.append("-Wextra -Wshadow")
        fs.append(["-Wno-shadow"])
        assert fs.tokens == ("-Wall", "-Wextra", "-Wshadow", "-Wno-shadow")

    def test_append_does_not_deduplicate(self) -> None:
        fs = FlagString("-w")
        fs.append("-w")
        assert str(fs) == "-w -w"

    def test_remove_all_occurrences(self) -> None:
        fs = FlagString("-Wall -Wextra -Wall -Wconversion")
        assert fs.remove("-Wall") == 2
        assert str(fs) == "-Wextra -Wconversion"

    def test_remove_is_exact_match(self) -> None:
        fs = FlagString("-Wunused -Wunused-variable -Wno-unused")
        fs.remove("-Wunused")
        assert str(fs) == "-Wunused-variable -Wno-unused"

    def test_remove_absent_is_noop(self) -> None:
        fs = FlagString("-Wall")
        assert fs.remove("-Wshadow") == 0
        assert str(fs) == "-Wall"

    def test_remove_with_special_characters(self) -> None:
        fs = FlagString("-Wformat=2 -Wall")
        fs.remove("-Wformat=2")
        assert str(fs) == "-Wall"

    def test_remove_prefixed(self) -> None:
        fs = FlagString("-O2 -Wall /W3 -DNDEBUG -Wno-shadow")
        assert fs.remove_prefixed(("-W", "/W")) == 3
        assert str(fs) == "-O2 -DNDEBUG"

    def test_copy_is_independent(self) -> None:
        fs = FlagString("-Wall")
        dup = fs.copy()
        dup.append("-Wextra")
        assert str(fs) == "-Wall"
        assert str(dup) == "-Wall -Wextra"

    def test_iteration_is_a_snapshot(self) -> None:
        fs = FlagString("-Wa -Wb")
        for token in fs:
            fs.remove(token)
        assert len(fs) == 0

    def test_contains(self) -> None:
        fs = FlagString("-Wall")
        assert "-Wall" in fs
        assert "-W" not in fs
