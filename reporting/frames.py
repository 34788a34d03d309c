from __future__ import annotations
from typing import Iterable

import pandas as pd

from logic.calculator import StaffingRow
from logic.registry import StaffType

STAFF_TYPE_COLUMNS = ["StaffType_ID", "Title", "Title_Code"]
STAFFING_COLUMNS = ["StaffType_ID", "Title", "RatioStaffPatient", "Census", "Staff_Needed"]


def staff_types_frame(staff_types: Iterable[StaffType]) -> pd.DataFrame:
    records = [{"StaffType_ID": st.id, "Title": st.title, "Title_Code": st.code} for st in staff_types]
    return pd.DataFrame(records, columns=STAFF_TYPE_COLUMNS)


def staffing_frame(rows: Iterable[StaffingRow]) -> pd.DataFrame:
    """
    Calculator rows in display order.
    Census / Staff_Needed are nullable Int64 (<NA> when no census was entered).
    """
    rows = list(rows)
    records = [{
        "StaffType_ID": r.staff_type_id,
        "Title": r.title,
        "RatioStaffPatient": r.ratio,
        "Census": r.census,
        "Staff_Needed": r.required_staff,
    } for r in rows]
    df = pd.DataFrame(records, columns=STAFFING_COLUMNS)
    df["Census"] = pd.array([r.census for r in rows], dtype="Int64")
    df["Staff_Needed"] = pd.array([r.required_staff for r in rows], dtype="Int64")
    return df


def summary_frame(console, source: str = "") -> pd.DataFrame:
    plan = staffing_frame(console.staffing_rows())
    summary_data = {
        "Staff Types": [len(console.staff_types())],
        "Calculator Rows": [len(plan)],
        "Rows With Census": [int(plan["Census"].notna().sum())],
        "Total Census": [int(plan["Census"].sum())],
        "Total Staff Needed": [int(plan["Staff_Needed"].sum())],
    }
    if source:
        summary_data["Census Source"] = [source]
    return pd.DataFrame(summary_data)
