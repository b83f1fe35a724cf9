"""
Sales report layout.

Renders the sales PDF in one pass over an A4 page with 50 pt margins:
company header, title, a table of sales (one row per sale, in the order
given) and the "Total General" footer. Table geometry lives in SALES_COLUMNS;
header, body and footer rows are all drawn by `draw_row` from that table.
"""

import datetime
import io
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import List, Mapping, Optional, Sequence

from reportlab.lib import colors

from ...common.errors import ReportRenderError
from ...common.formatting import format_money, format_report_date, resolve_timezone
from ..sales.schemas import SaleRecord
from .canvas import DrawCommand, ReportCanvas
from .schemas import ReportOptions

logger = logging.getLogger(__name__)

MARGIN = 50
TABLE_LEFT = 50
TABLE_RIGHT = 550
PAGE_BREAK_Y = 750  # rows starting below this go on a new page

LOGO_X, LOGO_Y, LOGO_WIDTH = 50, 40, 100
COMPANY_BLOCK_X, COMPANY_BLOCK_Y = 400, 50
TABLE_HEADER_HEIGHT = 20
TABLE_HEADER_INSET = 5
TABLE_BODY_GAP = 25

FONT = "Helvetica"
FONT_BOLD = "Helvetica-Bold"
LOGO_FALLBACK_SIZE = 18
COMPANY_SIZE = 10
TITLE_SIZE = 22
SUBTITLE_SIZE = 12
EMPTY_SIZE = 14
HEADER_SIZE = 10
ROW_SIZE = 9
FOOTER_SIZE = 12

ACCENT = colors.HexColor("#0D47A1")
HEADER_SHADE = colors.HexColor("#F0F0F0")
MUTED = colors.gray
INK = colors.black


def line_height(size: float) -> float:
    # Helvetica ascender minus descender plus line gap, as a multiple of the font size
    return size * 1.156


@dataclass(frozen=True)
class Column:
    key: str
    label: str
    x: float
    width: float
    align: str = "left"
    clip: bool = False


SALES_COLUMNS = (
    Column("date", "Fecha", 60, 100),
    Column("seller", "Vendedor", 160, 200, clip=True),
    Column("subtotal", "Subtotal", 360, 80, align="right"),
    Column("total", "Total", 450, 80, align="right"),
)


@dataclass
class LayoutState:
    y: float = MARGIN
    grand_total: Decimal = Decimal(0)
    page_count: int = 1
    rows_rendered: int = 0


@dataclass
class RenderedReport:
    pdf: bytes
    page_count: int
    row_count: int
    grand_total: Decimal
    trace: List[DrawCommand] = field(default_factory=list)


def draw_row(pdf: ReportCanvas, columns: Sequence[Column], values: Mapping[str, str], y: float) -> None:
    """Draw `values` into their columns at one shared y. Columns without a value are skipped."""
    for column in columns:
        if column.key not in values:
            continue
        text = values[column.key]
        if column.clip:
            text = pdf.fit_text(text, column.width)
        pdf.text(text, column.x, y, align=column.align, width=column.width)


def sale_row_values(record: SaleRecord, options: ReportOptions, tz: datetime.tzinfo) -> dict:
    return {
        "date": format_report_date(record.timestamp, tz) if record.timestamp else options.placeholder,
        "seller": record.seller or options.placeholder,
        "subtotal": format_money(record.subtotal),
        "total": format_money(record.total),
    }


def _draw_header(pdf: ReportCanvas, state: LayoutState, options: ReportOptions) -> None:
    if options.logo_path and Path(options.logo_path).is_file():
        pdf.image(options.logo_path, LOGO_X, LOGO_Y, LOGO_WIDTH)
    else:
        pdf.set_font(FONT, LOGO_FALLBACK_SIZE)
        pdf.text(options.company_name, LOGO_X, LOGO_Y)

    pdf.set_font(FONT, COMPANY_SIZE)
    pdf.set_fill_color(MUTED)
    y = COMPANY_BLOCK_Y
    block_width = pdf.width - MARGIN - COMPANY_BLOCK_X
    for line in options.company_lines:
        pdf.text(line, COMPANY_BLOCK_X, y, align="right", width=block_width)
        y += line_height(COMPANY_SIZE)
    state.y = y + 2 * line_height(COMPANY_SIZE)


def _draw_title(pdf: ReportCanvas, state: LayoutState, options: ReportOptions,
                generated_at: datetime.datetime, tz: datetime.tzinfo) -> None:
    content_width = pdf.width - 2 * MARGIN

    pdf.set_font(FONT, TITLE_SIZE)
    pdf.set_fill_color(ACCENT)
    pdf.text(options.title, MARGIN, state.y, align="center", width=content_width)
    state.y += line_height(TITLE_SIZE)

    pdf.set_font(FONT, SUBTITLE_SIZE)
    pdf.set_fill_color(INK)
    generated = f"{options.generated_label}: {format_report_date(generated_at, tz)}"
    pdf.text(generated, MARGIN, state.y, align="center", width=content_width)
    state.y += 3 * line_height(SUBTITLE_SIZE)


def _draw_empty_notice(pdf: ReportCanvas, state: LayoutState, options: ReportOptions) -> None:
    pdf.set_font(FONT, EMPTY_SIZE)
    pdf.text(options.empty_message, MARGIN, state.y, align="center", width=pdf.width - 2 * MARGIN)
    state.y += line_height(EMPTY_SIZE)


def _draw_table_header(pdf: ReportCanvas, state: LayoutState) -> None:
    top = state.y
    pdf.fill_rect(TABLE_LEFT, top, TABLE_RIGHT - TABLE_LEFT, TABLE_HEADER_HEIGHT, HEADER_SHADE)

    pdf.set_fill_color(INK)
    pdf.set_font(FONT_BOLD, HEADER_SIZE)
    draw_row(pdf, SALES_COLUMNS, {c.key: c.label for c in SALES_COLUMNS}, top + TABLE_HEADER_INSET)
    pdf.hline(TABLE_LEFT, TABLE_RIGHT, top + TABLE_HEADER_HEIGHT, MUTED)

    state.y = top + TABLE_HEADER_HEIGHT + TABLE_BODY_GAP


def _start_new_page(pdf: ReportCanvas, state: LayoutState) -> None:
    pdf.new_page()
    state.page_count += 1
    state.y = MARGIN + line_height(pdf.font_size)


def _draw_sale_row(pdf: ReportCanvas, state: LayoutState, record: SaleRecord,
                   options: ReportOptions, tz: datetime.tzinfo) -> None:
    if state.y > PAGE_BREAK_Y:
        _start_new_page(pdf, state)

    draw_row(pdf, SALES_COLUMNS, sale_row_values(record, options, tz), state.y)
    if record.total < 0:
        logger.warning("Sale by %s has a negative total %s", record.seller or options.placeholder, record.total)
    state.grand_total += record.total
    state.rows_rendered += 1
    state.y += line_height(ROW_SIZE)


def _draw_footer(pdf: ReportCanvas, state: LayoutState, options: ReportOptions) -> None:
    needed = 1.5 * line_height(ROW_SIZE) + line_height(FOOTER_SIZE)
    if state.y + needed > pdf.height - MARGIN:
        _start_new_page(pdf, state)

    state.y += 0.5 * line_height(ROW_SIZE)
    pdf.hline(TABLE_LEFT, TABLE_RIGHT, state.y, INK)
    state.y += line_height(ROW_SIZE)

    # Label and amount share one y so they read as a single line
    footer_y = state.y
    pdf.set_font(FONT_BOLD, FOOTER_SIZE)
    draw_row(pdf, SALES_COLUMNS, {
        "subtotal": options.total_label,
        "total": format_money(state.grand_total),
    }, footer_y)
    state.y = footer_y + line_height(FOOTER_SIZE)


def render_sales_report(
    records: Sequence[SaleRecord],
    options: Optional[ReportOptions] = None,
    generated_at: Optional[datetime.datetime] = None,
) -> RenderedReport:
    """
    Render the sales report PDF.

    Args:
        records: Sales in the order they should be listed (newest first, as fetched).
        options: Company block, titles and placeholders. Defaults to ReportOptions().
        generated_at: Date printed under the title. Defaults to now.

    Returns:
        RenderedReport with the PDF bytes, page and row counts, the grand total
        and the trace of draw commands.

    Raises:
        ReportRenderError: any failure while drawing. No partial PDF is returned.
    """
    options = options or ReportOptions()
    generated_at = generated_at or datetime.datetime.now(datetime.timezone.utc)
    buffer = io.BytesIO()
    state = LayoutState()

    try:
        tz = resolve_timezone(options.timezone)
        pdf = ReportCanvas(buffer, title=options.title)

        _draw_header(pdf, state, options)
        _draw_title(pdf, state, options, generated_at, tz)

        if not records:
            _draw_empty_notice(pdf, state, options)
        else:
            _draw_table_header(pdf, state)
            pdf.set_font(FONT, ROW_SIZE)
            for record in records:
                _draw_sale_row(pdf, state, record, options, tz)
            _draw_footer(pdf, state, options)

        pdf.save()
    except Exception as e:
        raise ReportRenderError(f"Could not render the sales report: {str(e) or repr(e)}") from e

    logger.info(
        "Rendered sales report: %d rows on %d page(s), total %s",
        state.rows_rendered, state.page_count, format_money(state.grand_total),
    )
    return RenderedReport(
        pdf=buffer.getvalue(),
        page_count=state.page_count,
        row_count=state.rows_rendered,
        grand_total=state.grand_total,
        trace=pdf.trace,
    )
