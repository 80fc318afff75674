# meeting_days/services/excel_export.py
"""
Excel rendering of monthly meeting-day breakdowns.
"""

from __future__ import annotations

from datetime import datetime
from io import BytesIO
from typing import Sequence

from openpyxl import Workbook
from openpyxl.styles import Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from meeting_days.schemas.monthly_breakdown import MonthlyBreakdown

SHEET_TITLE = "Meeting Days Report"
HEADER_ROW = 4
HEADERS = ["Month", "Year", "Total Days", "Weekdays", "Saturdays", "Sundays", "Holidays"]


def _fit_columns(ws) -> None:
    """Widen each column to its longest value, skipping the title rows."""
    for col_idx in range(1, len(HEADERS) + 1):
        width = max(
            (
                len(str(cell.value))
                for (cell,) in ws.iter_rows(
                    min_row=HEADER_ROW, min_col=col_idx, max_col=col_idx
                )
                if cell.value is not None
            ),
            default=0,
        )
        ws.column_dimensions[get_column_letter(col_idx)].width = width + 2


def generate_excel_report(
    months: Sequence[MonthlyBreakdown],
    meeting_subject: str,
    generated_at: datetime | None = None,
) -> bytes:
    """
    Render `months` as a single-sheet .xlsx workbook and return its bytes.

    Layout:
    Row 1: "Meeting Days Report: <subject>" (bold, size 14)
    Row 2: "Generated: YYYY-MM-DD HH:MM:SS" (italic)
    Row 4: Headers - Month | Year | Total Days | Weekdays | Saturdays | Sundays | Holidays
    Row 5+: One row per breakdown, in the order given
    """
    if generated_at is None:
        generated_at = datetime.now()

    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE

    title = ws.cell(row=1, column=1, value=f"Meeting Days Report: {meeting_subject}")
    title.font = Font(bold=True, size=14)

    generated = ws.cell(
        row=2,
        column=1,
        value=f"Generated: {generated_at:%Y-%m-%d %H:%M:%S}",
    )
    generated.font = Font(italic=True)

    header_fill = PatternFill(fill_type="solid", start_color="D3D3D3", end_color="D3D3D3")
    header_border = Border(bottom=Side(style="thick"))
    for col_idx, header in enumerate(HEADERS, start=1):
        cell = ws.cell(row=HEADER_ROW, column=col_idx, value=header)
        cell.font = Font(bold=True)
        cell.fill = header_fill
        cell.border = header_border

    for row_idx, data in enumerate(months, start=HEADER_ROW + 1):
        row_data = [
            data.month_name,
            data.year,
            data.total_meeting_days,
            data.weekday_count,
            data.saturday_count,
            data.sunday_count,
            data.holiday_count,
        ]
        for col_idx, value in enumerate(row_data, start=1):
            ws.cell(row=row_idx, column=col_idx, value=value)

    _fit_columns(ws)

    stream = BytesIO()
    wb.save(stream)
    return stream.getvalue()
