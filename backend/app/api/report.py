"""Report API — pre-generation checks for the evaluation PDF."""

from fastapi import APIRouter, Depends

from app.api.dependencies import enforce_rate_limit
from app.validators import PrePDFContext, PrePDFValidationResult, validate_before_pdf_generation

router = APIRouter(prefix="/report")


@router.post("/pre-pdf", response_model=PrePDFValidationResult)
async def pre_pdf_check(
    context: PrePDFContext,
    client_ip: str = Depends(enforce_rate_limit),
):
    """Check the evaluation context before the PDF is rendered.

    Errors block generation, warnings become coherence notes in the report.
    """
    return validate_before_pdf_generation(context)
