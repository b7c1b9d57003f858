"""Candidate warning flags probed at the start of every configure run.

The base list is shared by every platform.  Exactly one tail token is
appended per platform family: ``-W3`` on Windows (``-W4`` drowns the build
in noise from system headers), ``-Wall`` everywhere else.
"""

import enum
import sys
from pathlib import PurePath


class Platform(str, enum.Enum):
    """Target platform family used to pick the candidate tail token."""

    WINDOWS = "windows"
    UNIX = "unix"


BASE_WARNING_FLAGS: tuple[str, ...] = (
    "-W",
    "-Wextra",
    "-Wchar-subscripts",
    "-Wcomment",
    "-Wno-coverage-mismatch",
    "-Wdouble-promotion",
    "-Wformat",
    "-Wnonnull",
    "-Winit-self",
    "-Wimplicit-int",
    "-Wimplicit-function-declaration",
    "-Wimplicit",
    "-Wignored-qualifiers",
    "-Wmain",
    "-Wmissing-braces",
    "-Wmissing-include-dirs",
    "-Wparentheses",
    "-Wsequence-point",
    "-Wreturn-type",
    "-Wswitch",
    "-Wtrigraphs",
    "-Wunused-but-set-parameter",
    "-Wunused-but-set-variable",
    "-Wunused-function",
    "-Wunused-label",
    "-Wunused-local-typedefs",
    "-Wunused-parameter",
    "-Wunused-variable",
    "-Wunused-value",
    "-Wunused",
    "-Wuninitialized",
    "-Wmaybe-uninitialized",
    "-Wunknown-pragmas",
    "-Wmissing-format-attribute",
    "-Warray-bounds",
    "-Wtrampolines",
    "-Wfloat-equal",
    "-Wdeclaration-after-statement",
    "-Wundef",
    "-Wshadow",
    "-Wunsafe-loop-optimizations",
    "-Wpointer-arith",
    "-Wtype-limits",
    "-Wbad-function-cast",
    "-Wcast-qual",
    "-Wcast-align",
    "-Wwrite-strings",
    "-Wclobbered",
    "-Wempty-body",
    "-Wenum-compare",
    "-Wjump-misses-init",
    "-Wsign-compare",
    "-Wsizeof-pointer-memaccess",
    "-Waddress",
    "-Wlogical-op",
    "-Waggregate-return",
    "-Wstrict-prototypes",
    "-Wold-style-declaration",
    "-Wold-style-definition",
    "-Wmissing-parameter-type",
    "-Wmissing-prototypes",
    "-Wmissing-declarations",
    "-Wmissing-field-initializers",
    "-Woverride-init",
    "-Wpacked",
    "-Wredundant-decls",
    "-Wnested-externs",
    "-Winline",
    "-Winvalid-pch",
    "-Wvariadic-macros",
    "-Wvarargs",
    "-Wvector-operation-performance",
    "-Wvla",
    "-Wpointer-sign",
    "-Wdisabled-optimization",
    "-Wendif-labels",
    "-Wpacked-bitfield-compat",
    "-Wformat-security",
    "-Woverlength-strings",
    "-Wstrict-aliasing",
    "-Wstrict-overflow",
    "-Wsync-nand",
    "-Wvolatile-register-var",
    "-Wconversion",
    "-Wsign-conversion",
)

# Exactly one of these closes the candidate list.
PLATFORM_TAIL_FLAG: dict[Platform, str] = {
    Platform.WINDOWS: "-W3",
    Platform.UNIX: "-Wall",
}

# Prefixes stripped by remove_all_warnings(), independent of platform.
WARNING_PREFIXES: tuple[str, ...] = ("-W", "/W")

# Blanket "no warnings" switches.  Only one is ever appended, but both are
# recognised when cleaning up.
GCC_SUPPRESS_FLAG = "-w"
MSVC_SUPPRESS_FLAG = "/w"
SUPPRESS_FLAGS: frozenset[str] = frozenset({GCC_SUPPRESS_FLAG, MSVC_SUPPRESS_FLAG})

_MSVC_DRIVERS = {"cl", "cl.exe", "clang-cl", "clang-cl.exe"}


def detect_platform() -> Platform:
    """Return the platform family of the running interpreter."""
    return Platform.WINDOWS if sys.platform == "win32" else Platform.UNIX


def parse_platform(value: str | Platform | None) -> Platform:
    """Turn a config/CLI value (``"auto"``, ``"windows"``, ``"unix"``) into a Platform."""
    if isinstance(value, Platform):
        return value
    if value is None or value == "auto":
        return detect_platform()
    try:
        return Platform(value.lower())
    except ValueError:
        valid = ["auto"] + [p.value for p in Platform]
        raise ValueError(f"Unknown platform {value!r}, valid: {valid}") from None


def is_msvc_driver(compiler: list[str] | str) -> bool:
    """True if the compiler command runs an MSVC-style driver (``cl``, ``clang-cl``).

    A leading runner such as ``wine`` is skipped.
    """
    parts = compiler.split() if isinstance(compiler, str) else list(compiler)
    for part in parts:
        name = PurePath(part.replace("\\", "/")).name.lower()
        if name in {"wine", "wibo", "ccache", "sccache"}:
            continue
        return name in _MSVC_DRIVERS
    return False


def suppress_flag(msvc: bool) -> str:
    """The blanket warning suppressor for the toolchain style."""
    return MSVC_SUPPRESS_FLAG if msvc else GCC_SUPPRESS_FLAG


def candidate_flags(
    platform: Platform | None = None, extra: list[str] | tuple[str, ...] = ()
) -> list[str]:
    """Build the ordered candidate list for *platform*.

    Args:
        platform: Platform family; detected from the interpreter if ``None``.
        extra: Project-specific candidates appended after the platform tail.
    """
    if platform is None:
        platform = detect_platform()
    return [*BASE_WARNING_FLAGS, PLATFORM_TAIL_FLAG[platform], *extra]
