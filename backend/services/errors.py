from __future__ import annotations


class FilterAssistantError(Exception):
    """Base for every error raised by the filter core."""


class ParseError(FilterAssistantError):
    """Suggestion text is not well-formed JSON. Terminal for the turn."""


class SchemaError(FilterAssistantError):
    """Suggestion parsed but fields, types or enumerations are wrong. Terminal for the turn."""


class CatalogMismatchError(FilterAssistantError):
    """A single chip's value is not in the catalog vocabulary. The chip is dropped."""

    def __init__(self, message: str, chip=None):
        super().__init__(message)
        self.chip = chip


class UpstreamServiceError(FilterAssistantError):
    """The suggestion generator failed or timed out. Terminal for the turn."""


class PriceConflictWarning(UserWarning):
    """Extracted price contradicted the held range; resolved and logged, never raised."""
