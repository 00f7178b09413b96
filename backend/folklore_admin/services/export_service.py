"""Excel exports."""

import io
from typing import Iterable, List

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill

from folklore_admin.models.staff import StaffMember

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

STAFF_HEADERS = [
    "ID", "Jméno", "Příjmení", "E-mail", "Telefon", "Pozice",
    "Hodinová sazba", "Fixní sazba", "Aktivní", "Nouzový kontakt", "Nouzový telefon",
]


def create_excel_export(rows: Iterable[list], headers: List[str], sheet_name: str = "Report") -> bytes:
    """Workbook with a styled header row and fitted column widths."""
    wb = Workbook()
    ws = wb.active
    ws.title = sheet_name

    for col_idx, header in enumerate(headers, 1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.font = Font(bold=True, color="FFFFFF")
        cell.fill = PatternFill(start_color="366092", end_color="366092", fill_type="solid")
        cell.alignment = Alignment(horizontal="center", vertical="center")

    for row_idx, row_data in enumerate(rows, 2):
        for col_idx, value in enumerate(row_data, 1):
            ws.cell(row=row_idx, column=col_idx, value=value)

    for column in ws.columns:
        max_length = max(len(str(cell.value)) if cell.value is not None else 0 for cell in column)
        ws.column_dimensions[column[0].column_letter].width = min(max_length + 2, 50)

    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def staff_workbook(members: Iterable[StaffMember]) -> bytes:
    rows = [
        [
            m.id,
            m.first_name,
            m.last_name,
            m.email or "",
            m.phone or "",
            m.role,
            float(m.hourly_rate) if m.hourly_rate is not None else None,
            float(m.fixed_rate) if m.fixed_rate is not None else None,
            "ano" if m.is_active else "ne",
            m.emergency_contact or "",
            m.emergency_phone or "",
        ]
        for m in members
    ]
    return create_excel_export(rows, STAFF_HEADERS, sheet_name="Personál")
