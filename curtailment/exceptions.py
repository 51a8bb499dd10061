"""
Exception hierarchy for the curtailment optimization engine.

Hierarchy:
    CurtailmentError (base)
    ├── InsufficientDataError      - no usable prices for the requested window
    ├── InvalidParameterError      - rejected before any computation starts
    ├── ComputationInvariantError  - a sanity check on a finished run failed
    └── ExternalDependencyError    - price source or currency service unavailable

Every error carries a ``context`` dictionary with the input parameters,
series length and offending values so that a failing run can be reproduced.
"""

from typing import Any, Dict, Optional


class CurtailmentError(Exception):
    """Base exception for all curtailment engine errors."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the error for API responses and logs."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
        }

    def __str__(self) -> str:
        if not self.context:
            return self.message
        details = ", ".join(f"{key}={value}" for key, value in self.context.items())
        return f"{self.message} ({details})"


class InsufficientDataError(CurtailmentError):
    """No price series is available for the requested window."""


class InvalidParameterError(CurtailmentError):
    """
    A parameter was rejected before computation.

    ``reason`` distinguishes the failure: ``not_a_number``, ``too_low``,
    ``too_high`` or ``invalid``.
    """

    def __init__(
        self,
        message: str,
        reason: str = "invalid",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, context)
        self.reason = reason

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        payload["reason"] = self.reason
        return payload


class ComputationInvariantError(CurtailmentError):
    """The optimized result failed a sanity check and must not be reported."""


class ExternalDependencyError(CurtailmentError):
    """A collaborator (price source, currency service) could not be reached."""
