"""Custom exceptions for the indicator engine and its verification harness.

All engine, series and fixture exceptions live here to avoid circular
imports between modules. None of them is retried: each one reports a broken
precondition to the caller.
"""


class TAError(Exception):
    """Base exception for all indicator engine errors."""


class FormatError(TAError, ValueError):
    """Raised when numeric text cannot be parsed into a Num."""


class OutOfOrderError(TAError):
    """Raised when a bar does not end strictly after the previous bar."""


class IndexOutOfRangeError(TAError, IndexError):
    """Raised when an index falls outside a series' [begin_index, end_index]."""


class InvalidParameterError(TAError, ValueError):
    """Raised when indicator parameters do not match the formula's shape."""


class FixtureFormatError(TAError):
    """Raised when a reference fixture lacks a required section or cell."""


class CyclicDependencyError(TAError):
    """Raised when an indicator reads an index it is still computing."""


class ToleranceMismatchError(TAError, AssertionError):
    """Raised when a computed value diverges from the reference beyond epsilon.

    Carries the first mismatching index together with both values so a
    failure can be diagnosed without re-running.
    """

    def __init__(self, index: int, expected, actual, epsilon) -> None:
        self.index = index
        self.expected = expected
        self.actual = actual
        self.epsilon = epsilon
        super().__init__(
            f"value mismatch at index {index}: expected {expected}, "
            f"got {actual} (epsilon {epsilon})"
        )
