"""
PDF generation endpoint.

Turns a card list into a print-ready PDF. The document is built completely
in memory before anything is sent, so a response is either a whole PDF or
a JSON error, never a mix.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Body, Depends, Response, status
from fastapi.responses import JSONResponse

from proxyprint.api.dependencies import get_image_fetcher, get_image_resolver
from proxyprint.api.schemas import GenerateRequest
from proxyprint.config import PDF_FILENAME
from proxyprint.models.failure import ErrorResponse, FailureKind, KnownError, NoCardsError
from proxyprint.services.image_fetcher import CardImageFetcher
from proxyprint.services.image_resolver import CardImageResolver
from proxyprint.services.proxy_sheet import build_proxy_sheet

logger = logging.getLogger(__name__)

router = APIRouter(tags=["pdf"])


def _error(error: KnownError) -> JSONResponse:
    return JSONResponse(
        status_code=error.status_code,
        content=error.to_response().model_dump(),
    )


@router.post(
    "/generate-pdf",
    response_class=Response,
    responses={
        200: {"content": {"application/pdf": {}}},
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def generate_pdf(
    resolver: Annotated[CardImageResolver, Depends(get_image_resolver)],
    fetcher: Annotated[CardImageFetcher, Depends(get_image_fetcher)],
    request: Annotated[GenerateRequest | None, Body()] = None,
) -> Response:
    """
    Generate a printable PDF of card images.

    Accepts parsed entries (`cards`) or raw list text (`text`).
    Cards that cannot be found print as labelled placeholders.
    Returns 400 if no usable cards were given or the list is too long to print.
    """
    request = request or GenerateRequest()

    try:
        entries = request.to_entries()
        if not entries:
            raise NoCardsError()

        sheet = await build_proxy_sheet(
            entries,
            layout=request.layout,
            enable_bleed=request.enable_bleed,
            resolver=resolver,
            fetcher=fetcher,
        )
    except KnownError as e:
        if e.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error("PDF generation failed: %s", e.message)
        return _error(e)
    except Exception as e:
        logger.exception("Error generating PDF")
        return _error(
            KnownError(
                FailureKind.UNKNOWN,
                str(e) or "Failed to generate PDF",
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
        )

    return Response(
        content=sheet.pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{PDF_FILENAME}"'},
    )
