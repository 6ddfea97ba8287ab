"""Error types raised by the search engine and its collaborators."""

from __future__ import annotations


class UltragrepError(Exception):
    """Base class for fatal ultragrep errors."""


class InvalidTimeFormat(UltragrepError, ValueError):
    """A time argument could not be parsed by any supported form."""

    def __init__(self, value: str, *, argument: str = "--start", reason: str | None = None) -> None:
        self.value = value
        self.argument = argument
        super().__init__(
            reason
            or f"Invalid time for {argument}: {value!r}. "
            "Use epoch seconds, YYYY-MM-DD[ HH:MM:SS] or YYYYMMDD."
        )


class InvalidPattern(UltragrepError, ValueError):
    """A search term is not a valid regular expression."""


class UnknownFormat(UltragrepError, LookupError):
    """The requested log format is not registered."""

    def __init__(self, name: str, known: list[str]) -> None:
        self.name = name
        super().__init__(f"Unknown log format '{name}'. Known formats: {', '.join(known)}")


class ConfigError(UltragrepError, ValueError):
    """The configuration file is unreadable, invalid or incomplete."""


class ConfigNotFound(ConfigError):
    """No configuration file exists at any of the searched locations."""
