"""
Drawing surface for the PDF reports.

ReportCanvas wraps a ReportLab canvas with the handful of primitives the
report layout needs, in top-down page coordinates: (0, 0) is the top-left
corner and y grows towards the bottom of the page, with text positioned by the
top of its line. Every primitive is also appended to `trace`, so layout can be
checked without parsing the PDF.
"""

from dataclasses import dataclass
from typing import BinaryIO, List, Optional, Tuple

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen import canvas

ELLIPSIS = "..."


@dataclass(frozen=True)
class DrawCommand:
    op: str  # "text", "image", "rect", "line" or "page"
    page: int
    x: float
    y: float
    text: Optional[str] = None
    font: Optional[str] = None
    size: Optional[float] = None
    align: Optional[str] = None
    width: Optional[float] = None


class ReportCanvas:
    def __init__(self, output: BinaryIO, pagesize: Tuple[float, float] = A4, title: Optional[str] = None):
        self._canvas = canvas.Canvas(output, pagesize=pagesize)
        if title:
            self._canvas.setTitle(title)
        self.width, self.height = pagesize
        self.page = 1
        self.trace: List[DrawCommand] = []
        self._font_name = "Helvetica"
        self._font_size = 12.0
        self._fill_color = colors.black
        self.set_font(self._font_name, self._font_size)

    @property
    def font_name(self) -> str:
        return self._font_name

    @property
    def font_size(self) -> float:
        return self._font_size

    def set_font(self, name: str, size: float) -> None:
        self._font_name, self._font_size = name, size
        self._canvas.setFont(name, size)

    def set_fill_color(self, color: colors.Color) -> None:
        self._fill_color = color
        self._canvas.setFillColor(color)

    def string_width(self, text: str) -> float:
        return pdfmetrics.stringWidth(text, self._font_name, self._font_size)

    def fit_text(self, text: str, width: float) -> str:
        """Shorten `text` with a trailing ellipsis until it fits in `width` at the current font."""
        if self.string_width(text) <= width:
            return text
        while text and self.string_width(text + ELLIPSIS) > width:
            text = text[:-1]
        return text + ELLIPSIS

    def _baseline(self, y: float) -> float:
        ascent, _ = pdfmetrics.getAscentDescent(self._font_name, self._font_size)
        return self.height - (y + ascent)

    def text(self, text: str, x: float, y: float, align: str = "left", width: Optional[float] = None) -> None:
        """
        Draw one line of text whose top sits at `y`.

        With `width`, "right" aligns the text to x + width and "center" centers it
        in [x, x + width]; without it, alignment is relative to `x` itself.
        """
        baseline = self._baseline(y)
        span = width or 0
        if align == "right":
            self._canvas.drawRightString(x + span, baseline, text)
        elif align == "center":
            self._canvas.drawCentredString(x + span / 2, baseline, text)
        else:
            self._canvas.drawString(x, baseline, text)
        self.trace.append(DrawCommand(
            "text", self.page, x, y, text=text, font=self._font_name,
            size=self._font_size, align=align, width=width,
        ))

    def image(self, path: str, x: float, y: float, width: float) -> None:
        """Draw an image `width` wide, keeping its aspect ratio, with its top edge at `y`."""
        reader = ImageReader(path)
        image_width, image_height = reader.getSize()
        height = width * image_height / image_width
        self._canvas.drawImage(reader, x, self.height - y - height, width=width, height=height, mask="auto")
        self.trace.append(DrawCommand("image", self.page, x, y, text=path, width=width))

    def fill_rect(self, x: float, y: float, width: float, height: float, color: colors.Color) -> None:
        self._canvas.saveState()
        self._canvas.setFillColor(color)
        self._canvas.rect(x, self.height - y - height, width, height, stroke=0, fill=1)
        self._canvas.restoreState()
        self.trace.append(DrawCommand("rect", self.page, x, y, width=width))

    def hline(self, x1: float, x2: float, y: float, color: colors.Color, line_width: float = 1) -> None:
        self._canvas.saveState()
        self._canvas.setStrokeColor(color)
        self._canvas.setLineWidth(line_width)
        self._canvas.line(x1, self.height - y, x2, self.height - y)
        self._canvas.restoreState()
        self.trace.append(DrawCommand("line", self.page, x1, y, width=x2 - x1))

    def new_page(self) -> None:
        self._canvas.showPage()
        self.page += 1
        # showPage() resets the graphics state
        self._canvas.setFont(self._font_name, self._font_size)
        self._canvas.setFillColor(self._fill_color)
        self.trace.append(DrawCommand("page", self.page, 0, 0))

    def save(self) -> None:
        self._canvas.save()
