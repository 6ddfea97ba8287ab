"""Search-term compilation; every term must match for a record to be reported."""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

from .errors import InvalidPattern


@dataclass(frozen=True, slots=True)
class TermMatcher:
    """Conjunction of compiled regular expressions."""

    terms: tuple[str, ...]
    regexps: tuple[re.Pattern[str], ...]

    def matches(self, text: str) -> bool:
        return all(rx.search(text) for rx in self.regexps)

    def describe(self) -> str:
        return " ".join(f"'{t}'" for t in self.terms)


def compile_terms(terms: Sequence[str], *, ignore_case: bool = False) -> TermMatcher:
    """Compile search terms, failing on the first invalid expression."""
    cleaned = tuple(t for t in terms if t)
    if not cleaned:
        raise InvalidPattern("At least one search pattern is required")

    flags = re.IGNORECASE if ignore_case else 0
    compiled: list[re.Pattern[str]] = []
    for term in cleaned:
        try:
            compiled.append(re.compile(term, flags))
        except re.error as exc:
            raise InvalidPattern(f"Invalid pattern {term!r}: {exc}") from exc
    return TermMatcher(terms=cleaned, regexps=tuple(compiled))
