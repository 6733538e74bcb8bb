"""Exceptions raised by the travel statistics engine."""

from __future__ import annotations


class FormatError(ValueError):
    """A date string is malformed or is not a valid calendar date."""


class StateError(ValueError):
    """A detail continuation row appeared before any trip row."""


class UnsupportedOptionError(ValueError):
    """An option value is unknown or not implemented."""
