"""Custom exception hierarchy for the fortress sudoku engine."""


class FortressError(Exception):
    """Base exception for engine failures."""


class InvalidConfigurationError(FortressError):
    """Raised when grid dimensions or given values are inconsistent."""


class GenerationError(FortressError):
    """Raised when a generation attempt cannot produce a puzzle."""


class InvariantViolationError(FortressError):
    """Raised when a minimized puzzle no longer has exactly one solution."""


class ValidationError(FortressError):
    """Raised when the grid integrity checks fail."""
