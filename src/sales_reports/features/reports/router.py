import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import PlainTextResponse

from ..sales.store import SalesStore
from .schemas import ReportOptions
from .service import ReportFailed, generate_sales_report

logger = logging.getLogger(__name__)

ERROR_PREFIX = "Error al generar el reporte: "

router = APIRouter(
    prefix="/report",
    tags=["Reports"],
)


def get_sales_store(request: Request) -> Optional[SalesStore]:
    """The store opened by the application lifespan."""
    return getattr(request.app.state, "sales_store", None)


def get_report_options() -> ReportOptions:
    return ReportOptions()


@router.get(
    "/sales",
    response_class=Response,
    responses={
        200: {"content": {"application/pdf": {}}, "description": "The sales report as a PDF download."},
        500: {"content": {"text/plain": {}}, "description": "The report could not be generated."},
    },
)
async def get_sales_report(
    store: Annotated[Optional[SalesStore], Depends(get_sales_store)],
    options: Annotated[ReportOptions, Depends(get_report_options)],
):
    if store is None:
        logger.error("Sales report requested before the sales store was initialized")
        return PlainTextResponse(
            ERROR_PREFIX + "the sales store is not available",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    outcome = await generate_sales_report(store, options)
    if isinstance(outcome, ReportFailed):
        return PlainTextResponse(ERROR_PREFIX + outcome.message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    logger.info("Serving sales report: %d rows, %d page(s)", outcome.row_count, outcome.page_count)
    return Response(
        content=outcome.pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{outcome.filename}"'},
    )
