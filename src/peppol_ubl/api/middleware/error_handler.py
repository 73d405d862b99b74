"""Error handling middleware."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from ...core.errors import (
    AttachmentError,
    DocumentGenerationError,
    MalformedPeppolIdentifierError,
)

logger = logging.getLogger(__name__)


def setup_error_handlers(app: FastAPI) -> None:
    """Setup exception handlers for the FastAPI app."""

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={
                "error": "Validation error",
                "detail": exc.errors(include_url=False, include_context=False, include_input=False),
            },
        )

    @app.exception_handler(MalformedPeppolIdentifierError)
    async def peppol_id_error_handler(
        request: Request, exc: MalformedPeppolIdentifierError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"error": "Malformed Peppol identifier", "detail": str(exc)},
        )

    @app.exception_handler(AttachmentError)
    async def attachment_error_handler(request: Request, exc: AttachmentError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"error": "Attachment error", "detail": str(exc)},
        )

    @app.exception_handler(DocumentGenerationError)
    async def generation_error_handler(
        request: Request, exc: DocumentGenerationError
    ) -> JSONResponse:
        logger.error(f"Generation failed for {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=500,
            content={"error": "Document generation failed", "detail": str(exc)},
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"error": "Validation error", "detail": str(exc)},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error processing {request.method} {request.url.path}")
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "detail": "An unexpected error occurred",
            },
        )
