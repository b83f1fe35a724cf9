"""Sales Report Schemas

Pydantic models describing what goes on the sales report (company block,
titles, placeholders) and the small JSON payloads served next to it."""
from typing import List, Optional

from pydantic import BaseModel, Field

from ...core.config import REPORT_FILENAME, REPORT_LOGO_PATH, REPORT_TIMEZONE


class ReportOptions(BaseModel):
    company_name: str = "TechNorth"
    company_lines: List[str] = Field(
        default_factory=lambda: [
            "TechNorth S.A. de C.V.",
            "TNO211101A01",
            "Av. Innovación 123, Apodaca, N.L.",
            "soporte@technorth.mx",
        ],
        description="Legal name, tax ID, address and contact email, top to bottom",
    )
    logo_path: Optional[str] = REPORT_LOGO_PATH
    title: str = "Reporte de Ventas"
    generated_label: str = "Generado el"
    empty_message: str = "No se encontraron ventas registradas."
    total_label: str = "Total General:"
    placeholder: str = Field("N/A", description="Shown for a missing date or seller")
    timezone: str = REPORT_TIMEZONE
    filename: str = REPORT_FILENAME


class HealthResponse(BaseModel):
    status: str
    store: Optional[str] = None
