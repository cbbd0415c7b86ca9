"""Illustration parsing API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from illustration_ai.core.exceptions import InvalidInputError
from illustration_ai.dependencies import get_extraction_pipeline
from illustration_ai.models.request.illustration import ParseIllustrationRequest
from illustration_ai.models.response.illustration import ErrorResponse, ParseIllustrationResponse
from illustration_ai.schemas.illustration import PageImage
from illustration_ai.services.extraction.illustration_pipeline import IllustrationExtractionPipeline
from illustration_ai.utils.logging import get_logger

LOGGER = get_logger(__name__)

router = APIRouter()


@router.post(
    "/parse-illustration",
    response_model=ParseIllustrationResponse,
    status_code=status.HTTP_200_OK,
    responses={
        400: {"description": "No usable page images", "model": ErrorResponse},
        405: {"description": "Method not allowed", "model": ErrorResponse},
        500: {"description": "Configuration or model service failure", "model": ErrorResponse},
    },
    summary="Extract structured data from an illustration",
    description=(
        "Accepts page images of a life-insurance illustration and returns carrier, "
        "product, policy fields, projections and expenses with a confidence score."
    ),
    operation_id="parse_life_insurance_illustration",
)
async def parse_illustration(
    request: ParseIllustrationRequest,
    pipeline: Annotated[IllustrationExtractionPipeline, Depends(get_extraction_pipeline)],
) -> ParseIllustrationResponse:
    """Run the extraction pipeline over the submitted pages.

    Errors are raised as ``AppError`` subclasses and rendered by the
    application's exception handlers.
    """
    if not request.images:
        raise InvalidInputError("No images provided")

    images = [PageImage.from_payload(payload) for payload in request.images]

    result = await pipeline.run(images)
    return ParseIllustrationResponse.from_result(result)
