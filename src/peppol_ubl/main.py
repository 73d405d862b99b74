"""FastAPI application entry point."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .api.middleware.error_handler import setup_error_handlers
from .api.routes import documents_router, health_router
from .config import get_settings

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    # Configure logging
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    app = FastAPI(
        title="Peppol UBL API",
        description=(
            "Generates Peppol BIS Billing 3.0 UBL 2.1 invoices and credit notes "
            "from JSON business documents."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Setup error handlers
    setup_error_handlers(app)

    # Include routers
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(documents_router, prefix="/api/v1/documents")

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "name": "Peppol UBL API",
            "version": __version__,
            "docs": "/docs",
        }

    logger.info(f"Peppol UBL API configured (debug={settings.debug})")
    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "peppol_ubl.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
