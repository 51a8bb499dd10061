"""
Base service interface for business logic.
"""

import logging
from abc import ABC, abstractmethod

from fastapi import HTTPException

from ..exceptions import (
    ComputationInvariantError,
    CurtailmentError,
    ExternalDependencyError,
    InsufficientDataError,
    InvalidParameterError
)

logger = logging.getLogger(__name__)

# Most specific first
ERROR_STATUS_CODES = [
    (InvalidParameterError, 400),
    (InsufficientDataError, 404),
    (ComputationInvariantError, 422),
    (ExternalDependencyError, 503),
]


class BaseService(ABC):
    """Abstract base service interface."""

    def __init__(self, repository=None):
        """Initialize service with repository dependency."""
        self.repository = repository

    @abstractmethod
    def validate_input(self, **kwargs) -> bool:
        """Validate input parameters."""
        pass

    def handle_exception(self, e: Exception, context: str = None) -> None:
        """Translate engine errors to HTTP errors consistently across services."""
        if isinstance(e, CurtailmentError):
            status_code = next(
                (code for error_type, code in ERROR_STATUS_CODES if isinstance(e, error_type)),
                500
            )
            detail = e.to_dict()
            if context:
                detail["operation"] = context
            raise HTTPException(status_code=status_code, detail=detail) from e

        logger.exception(f"Unexpected error in {context or self.__class__.__name__}")
        error_message = f"{context}: {str(e)}" if context else str(e)
        raise HTTPException(status_code=500, detail=error_message) from e
