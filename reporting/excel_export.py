from __future__ import annotations
from pathlib import Path

import pandas as pd
from openpyxl import load_workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from logic.badges import TitleBadge
from reporting.frames import staff_types_frame, staffing_frame, summary_frame

# --- Styles ---
HEADER_FILL = PatternFill(start_color="BDD7EE", end_color="BDD7EE", fill_type="solid")  # light blue
HEADER_FONT = Font(bold=True, color="000000")
THIN_BORDER = Border(
    left=Side(style="thin"), right=Side(style="thin"),
    top=Side(style="thin"), bottom=Side(style="thin")
)
CENTER_ALIGN = Alignment(horizontal="center", vertical="center")
CENSUS_FILL = PatternFill(start_color="C6EFCE", end_color="C6EFCE", fill_type="solid")  # light green

BADGE_COLUMNS = {"Staff Types": "Title_Code", "Staffing Calculator": "Title"}


def _badge_fill(code) -> tuple[PatternFill, Font]:
    badge = TitleBadge.from_code(code)
    fill = PatternFill(start_color=badge.background, end_color=badge.background, fill_type="solid")
    return fill, Font(bold=True, color=badge.foreground)


def _format_sheet(ws, sheet_name=None):
    """Header colors, borders, badge fills on code columns, entered-census highlight."""

    # --- Header row ---
    headers = {}
    for cell in ws[1]:
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.border = THIN_BORDER
        cell.alignment = CENTER_ALIGN
        headers[str(cell.value)] = cell.column

    badge_idx = headers.get(BADGE_COLUMNS.get(sheet_name, ""))
    census_idx = headers.get("Census") if sheet_name == "Staffing Calculator" else None

    # --- Data rows ---
    for row in ws.iter_rows(min_row=2, max_row=ws.max_row):
        for cell in row:
            cell.border = THIN_BORDER
            if isinstance(cell.value, (int, float)):
                cell.alignment = Alignment(horizontal="right", vertical="center")
            else:
                cell.alignment = Alignment(horizontal="left", vertical="center")

        if badge_idx:
            code_cell = row[badge_idx - 1]
            code_cell.fill, code_cell.font = _badge_fill(code_cell.value)

        if census_idx:
            census_cell = row[census_idx - 1]
            if census_cell.value not in (None, ""):
                census_cell.fill = CENSUS_FILL

    # --- Column widths ---
    for col in ws.columns:
        col_letter = get_column_letter(col[0].column)
        max_length = max((len(str(c.value)) for c in col if c.value is not None), default=0)
        ws.column_dimensions[col_letter].width = max(10, max_length + 2)

    ws.freeze_panes = "A2"


def export_workbook(console, out_path, source: str = "") -> Path:
    """Write Summary / Staff Types / Staffing Calculator sheets and format them."""
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    sheets = {
        "Summary": summary_frame(console, source),
        "Staff Types": staff_types_frame(console.staff_types()),
        "Staffing Calculator": staffing_frame(console.staffing_rows()),
    }

    with pd.ExcelWriter(out_path, engine="openpyxl") as writer:
        for sheet_name, df in sheets.items():
            df.to_excel(writer, sheet_name=sheet_name, index=False)

    # --- Apply formatting ---
    wb = load_workbook(out_path)
    for sheet_name in wb.sheetnames:
        _format_sheet(wb[sheet_name], sheet_name)
    wb.save(out_path)
    return out_path
