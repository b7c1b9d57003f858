"""FlagString: the ordered sequence of active warning flags.

The sequence is the single source of truth for one scope.  Application
order equals sequence order equals override precedence: for a given
compiler a later conflicting flag (``-w`` after ``-Wall``, ``-Wno-shadow``
after ``-Wshadow``) wins.  Every mutation therefore appends at the end or
deletes in place; nothing is ever reordered or deduplicated.

Tokens are opaque.  Text entering the sequence is split on whitespace, so
the "token followed by whitespace or end of string" boundary of the old
string-based representation becomes an explicit tokenizer rule and removal
is an exact comparison instead of a regex.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator


def tokenize(text: str | Iterable[str]) -> list[str]:
    """Split flag text into tokens.

    Accepts a single command-line fragment (``"-Wall -Wextra"``) or an
    iterable of fragments; each fragment is split on any whitespace and
    empty pieces are dropped.
    """
    if isinstance(text, str):
        return text.split()
    tokens: list[str] = []
    for fragment in text:
        tokens.extend(fragment.split())
    return tokens


class FlagString:
    """Mutable ordered sequence of flag tokens."""

    __slots__ = ("_tokens",)

    def __init__(self, flags: str | Iterable[str] = ()) -> None:
        self._tokens: list[str] = tokenize(flags)

    # -- read access ------------------------------------------------------

    @property
    def tokens(self) -> tuple[str, ...]:
        """Snapshot of the current tokens."""
        return tuple(self._tokens)

    def __iter__(self) -> Iterator[str]:
        return iter(tuple(self._tokens))

    def __len__(self) -> int:
        return len(self._tokens)

    def __contains__(self, token: object) -> bool:
        return token in self._tokens

    def __str__(self) -> str:
        return " ".join(self._tokens)

    def __repr__(self) -> str:
        return f"FlagString({str(self)!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FlagString):
            return self._tokens == other._tokens
        if isinstance(other, str):
            return self._tokens == tokenize(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def copy(self) -> FlagString:
        dup = FlagString()
        dup._tokens = list(self._tokens)
        return dup

    # -- mutation ---------------------------------------------------------

    def append(self, flags: str | Iterable[str]) -> None:
        """Append tokens at the end, verbatim and in order."""
        self._tokens.extend(tokenize(flags))

    def remove(self, flags: str | Iterable[str]) -> int:
        """Delete every exact occurrence of each given token.

        Returns the number of tokens removed; removing an absent token is
        not an error.
        """
        doomed = set(tokenize(flags))
        if not doomed:
            return 0
        before = len(self._tokens)
        self._tokens = [t for t in self._tokens if t not in doomed]
        return before - len(self._tokens)

    def remove_prefixed(self, prefixes: tuple[str, ...]) -> int:
        """Delete every token starting with one of *prefixes*."""
        before = len(self._tokens)
        self._tokens = [t for t in self._tokens if not t.startswith(prefixes)]
        return before - len(self._tokens)

    def replace(self, flags: str | Iterable[str]) -> None:
        """Overwrite the whole sequence."""
        self._tokens = tokenize(flags)
