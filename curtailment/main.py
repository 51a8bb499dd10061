"""
This module creates and configures the main FastAPI application for the
Load Curtailment Optimization API. It exposes the optimization engine that
decides which hours an electricity-intensive load should be powered down to
avoid the highest pool prices while meeting an uptime target.

API Categories:
    - System Information: Health and API metadata
    - Curtailment Analysis: Uptime optimization, scenarios, strike prices
    - Market Statistics: Price statistics, seasonal and yearly summaries
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import app_config
from .controllers import api_controller


def configure_logging() -> None:
    """Configure root logging from the application settings."""
    logging.basicConfig(
        level=getattr(logging, app_config.api.log_level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        FastAPI: Configured application with CORS enabled and every
        controller mounted under /api. Interactive docs are served at /docs
        and /redoc.
    """
    configure_logging()

    app = FastAPI(
        title=app_config.api.title,
        description=app_config.api.description,
        version=app_config.api.version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_tags=[
            {
                "name": "System Information",
                "description": "API health, version info, and system status endpoints"
            },
            {
                "name": "Curtailment Analysis",
                "description": "Curtailment hour selection, savings, scenario comparison and risk"
            },
            {
                "name": "Market Statistics",
                "description": "Price statistics, hourly and seasonal patterns, yearly uptime summaries"
            }
        ]
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_config.api.allow_origins,
        allow_credentials=app_config.api.allow_credentials,
        allow_methods=app_config.api.allow_methods,
        allow_headers=app_config.api.allow_headers,
    )

    app.include_router(
        api_controller.router,
        prefix="/api",
    )

    return app


# Create the app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host=app_config.api.host,
        port=app_config.api.port,
        reload=app_config.api.reload
    )
