from __future__ import annotations


class ParameterError(Exception):
    """Base class for configuration problems detected at model construction."""

    def __init__(self, key: str, message: str) -> None:
        super().__init__(message)
        self.key = key


class MissingParameter(ParameterError, KeyError):
    def __init__(self, key: str) -> None:
        super().__init__(key, f"Missing required parameter '{key}'")

    def __str__(self) -> str:
        return self.args[0]


class InvalidParameter(ParameterError, ValueError):
    def __init__(self, key: str, constraint: str) -> None:
        super().__init__(key, f"Invalid parameter '{key}': {constraint}")
        self.constraint = constraint


class NumericDomainWarning(RuntimeWarning):
    """A hyperbolic argument was clamped to the saturation boundary."""
