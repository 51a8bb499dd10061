"""
Base controller interface for API endpoints.

All controllers inherit from BaseController and implement _setup_routes()
to register their handlers on ``self.router``. Services already translate
engine errors into HTTP errors; controllers only wrap anything unexpected.

Usage:
    ```python
    class MyController(BaseController):
        def _setup_routes(self):
            @self.router.get("/my-endpoint")
            async def my_endpoint():
                return {"message": "Hello World"}
    ```
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from fastapi import APIRouter, HTTPException

logger = logging.getLogger(__name__)


class BaseController(ABC):
    """
    Abstract base controller for consistent API endpoint patterns.

    Attributes:
        router (APIRouter): FastAPI router instance for endpoint registration
    """

    def __init__(self):
        """Initialize controller with FastAPI router and register its routes."""
        self.router = APIRouter()
        self._setup_routes()

    @abstractmethod
    def _setup_routes(self):
        """Setup routes for this controller."""
        pass

    def handle_exception(self, e: Exception, context: Optional[str] = None) -> None:
        """
        Handle exceptions consistently across all controllers.

        HTTP errors raised by services pass through unchanged; anything else
        becomes an HTTP 500 with the context prepended.

        Raises:
            HTTPException: Always
        """
        if isinstance(e, HTTPException):
            raise e
        logger.exception(context or "Unhandled controller error")
        error_message = f"{context}: {str(e)}" if context else str(e)
        raise HTTPException(status_code=500, detail=error_message)
