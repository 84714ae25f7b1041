"""pipwatch.core.exceptions

Errors are part of the interface.

Only an invalid strategy selector is ever surfaced to callers. Numeric edge
cases are absorbed where they occur, upstream outages are absorbed at the
price-feed boundary.
"""

from __future__ import annotations


class PipwatchError(Exception):
    """Base exception for pipwatch."""


class ConfigError(PipwatchError):
    """Configuration is missing, invalid, or inconsistent."""


class UnknownStrategyError(PipwatchError):
    """Strategy identifier is not one of the supported strategies."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown strategy: {name}")
        self.name = name


class UpstreamUnavailableError(PipwatchError):
    """The quote provider could not deliver a usable price series."""
