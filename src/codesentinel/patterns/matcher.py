from __future__ import annotations

import re
from dataclasses import dataclass

_FLAG_BITS = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    # `str` patterns are always unicode-aware.
    "u": 0,
}


@dataclass(frozen=True, slots=True)
class TextMatcher:
    """
    A compiled regular expression plus its repeat policy.

    Matching never keeps state between calls: every call scans the buffer from
    the start, so one matcher can be shared by any number of scans.
    `repeat=False` limits a matcher to its first match.
    """

    regex: re.Pattern[str]
    repeat: bool = True

    @property
    def source(self) -> str:
        return self.regex.pattern

    def find_all(self, text: str) -> list[re.Match[str]]:
        if self.repeat:
            return list(self.regex.finditer(text))
        first = self.regex.search(text)
        return [] if first is None else [first]

    def search(self, text: str) -> re.Match[str] | None:
        return self.regex.search(text)

    def count(self, text: str) -> int:
        return len(self.find_all(text))


def matcher(source: str, flags: int = 0, *, repeat: bool = True) -> TextMatcher:
    return TextMatcher(regex=re.compile(source, flags), repeat=repeat)


def parse_flags(letters: str) -> tuple[int, bool]:
    """
    Translate regex flag letters (e.g. "gi", "gm") into `re` flags.

    Returns `(flags, repeat)`; `g` turns repetition on. Raises ValueError for
    letters that have no meaning here.
    """

    flags = 0
    repeat = False
    for letter in letters:
        if letter == "g":
            repeat = True
            continue
        bit = _FLAG_BITS.get(letter)
        if bit is None:
            raise ValueError(f"Unsupported regex flag {letter!r} (expected any of: g, i, m, s, u).")
        flags |= bit
    return flags, repeat
