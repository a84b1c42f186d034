"""Errors raised by the pivoted normalization scoring core."""

from __future__ import annotations


class PivotRankError(Exception):
    """Base class for all scoring errors."""


class InvalidConfigurationError(PivotRankError, ValueError):
    """An unrecognized combination, pivotization or quantification value."""

    def __init__(self, option: str, value: object):
        self.option = option
        self.value = value
        super().__init__(f"The value of {option} is invalid: {value!r}")


class StatisticsUnavailableError(PivotRankError, RuntimeError):
    """The statistics provider could not answer a corpus scan."""


class DomainError(PivotRankError, ArithmeticError):
    """A formula was evaluated with a zero denominator."""
