"""
payoffkit exception hierarchy.

All payoffkit exceptions inherit from PayoffKitError, making it easy for consumers
to catch library-level errors while still distinguishing specific failure modes.
Every error is scoped to one call; no calculator returns a partial result.
"""


class PayoffKitError(Exception):
    """Base exception class for all payoffkit errors."""


class ConfigurationError(PayoffKitError):
    """Raised for configuration errors (missing keys, invalid values)."""


class InvalidInputError(PayoffKitError, ValueError):
    """Raised for inputs outside the numeric domain (negative balance, zero term)."""


class CalculationError(PayoffKitError):
    """Raised when a well-formed input has no meaningful result."""


class NonConvergingError(CalculationError):
    """Raised when payments can never pay a balance down to zero."""

    def __init__(self, message: str, months_simulated: int = 0):
        super().__init__(message)
        self.months_simulated = months_simulated
