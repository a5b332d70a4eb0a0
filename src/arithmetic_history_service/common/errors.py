"""Typed exceptions raised by the calculator and the history store."""


class DomainError(Exception):
    """A calculation was rejected by a business rule."""


class DivisionByZeroError(DomainError):
    """The divisor of a division is zero."""

    def __init__(self) -> None:
        super().__init__("Cannot divide by zero")


class NonFiniteResultError(DomainError):
    """The result overflowed and cannot be represented as a finite number."""

    def __init__(self) -> None:
        super().__init__("Result is not a finite number")


class StorageUnavailableError(Exception):
    """The history store could not read or write its records."""
