"""Document generation endpoints."""

import logging

from fastapi import APIRouter, HTTPException, Request, Response
from pydantic import BaseModel

from ...core.models import BusinessDocument, CreditNote, Invoice
from ...core.pipeline import DocumentPipeline
from ...validators import validate_document

logger = logging.getLogger(__name__)
router = APIRouter(tags=["documents"])


class ValidationResponse(BaseModel):
    """Response for document validation."""

    is_valid: bool
    errors: list[str]
    warnings: list[str]


def _generate(document: BusinessDocument, validate: bool | None) -> Response:
    # Never read server paths on behalf of a client
    if document.pdf_filename and not document.pdf_data:
        raise HTTPException(
            status_code=400,
            detail="pdf_filename requires inline pdf_data",
        )

    result = DocumentPipeline().generate(document, validate=validate)

    headers = {"Content-Disposition": f'attachment; filename="{result.filename}"'}
    if result.validation is not None:
        headers["X-Validation-Status"] = "valid" if result.validation.is_valid else "invalid"
    return Response(content=result.content, media_type=result.media_type, headers=headers)


@router.post("/invoice")
async def generate_invoice(request: Request, validate: bool | None = None) -> Response:
    """
    Generate a Peppol UBL invoice from a JSON document.

    Attachments must be sent inline as base64 ``pdf_data``.
    """
    document = Invoice.model_validate_json(await request.body())
    logger.info(f"Invoice request {document.id}")
    return _generate(document, validate)


@router.post("/credit-note")
async def generate_credit_note(request: Request, validate: bool | None = None) -> Response:
    """Generate a Peppol UBL credit note from a JSON document."""
    document = CreditNote.model_validate_json(await request.body())
    logger.info(f"Credit note request {document.id}")
    return _generate(document, validate)


@router.post("/validate", response_model=ValidationResponse)
async def validate_xml(request: Request) -> ValidationResponse:
    """Run the offline self-checks over a posted UBL document."""
    content = await request.body()
    if not content:
        raise HTTPException(status_code=400, detail="Empty request body")

    result = validate_document(content)
    return ValidationResponse(
        is_valid=result.is_valid,
        errors=result.errors,
        warnings=result.warnings,
    )
