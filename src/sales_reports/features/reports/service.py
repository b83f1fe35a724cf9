"""
Reports Service Module

Produces the sales report for the HTTP layer and the CLI. Fetching and
rendering errors stop at this boundary: callers get a ReportReady or a
ReportFailed value back instead of an exception.
"""

import datetime
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Literal, Optional, Union

from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError

from ...common.errors import ReportRenderError, SalesFetchError
from ...core.config import SALES_COLLECTION
from ..sales.service import fetch_sales
from ..sales.store import SalesStore
from .layout import render_sales_report
from .schemas import ReportOptions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportReady:
    pdf: bytes
    filename: str
    page_count: int
    row_count: int
    grand_total: Decimal


@dataclass(frozen=True)
class ReportFailed:
    stage: Literal["fetch", "render"]
    message: str


ReportOutcome = Union[ReportReady, ReportFailed]


async def generate_sales_report(
    store: SalesStore,
    options: Optional[ReportOptions] = None,
    collection: str = SALES_COLLECTION,
    generated_at: Optional[datetime.datetime] = None,
) -> ReportOutcome:
    """
    Fetches every sale and renders the PDF report.

    The whole document is rendered in memory before anything is returned, so a
    failure at any point still yields a clean ReportFailed and never a
    truncated PDF. An empty collection is a success (a one-page "no sales" report).

    Args:
        store: The sales store to read from.
        options: Company block, titles and placeholders for the report.
        collection: Name of the sales collection in the store.
        generated_at: Date shown under the title; defaults to now.

    Returns:
        ReportReady with the PDF bytes, or ReportFailed with the stage that
        failed ("fetch" or "render") and a description of the error.
    """
    options = options or ReportOptions()

    try:
        records = await fetch_sales(store, collection)
    except SalesFetchError as e:
        logger.exception("Fetching sales for the report failed")
        return ReportFailed(stage="fetch", message=str(e))
    except ValidationError as e:
        # A stored value that can't be shown as a date or amount
        logger.exception("A sale document could not be read")
        return ReportFailed(stage="render", message=f"Invalid sale data: {e.errors()[0]['msg']}")
    except Exception as e:
        logger.exception("Unexpected error while fetching sales")
        return ReportFailed(stage="fetch", message=str(e))

    try:
        # ReportLab is CPU-bound; keep it off the event loop
        rendered = await run_in_threadpool(render_sales_report, records, options, generated_at)
    except ReportRenderError as e:
        logger.exception("Rendering the sales report failed")
        return ReportFailed(stage="render", message=str(e))

    return ReportReady(
        pdf=rendered.pdf,
        filename=options.filename,
        page_count=rendered.page_count,
        row_count=rendered.row_count,
        grand_total=rendered.grand_total,
    )
