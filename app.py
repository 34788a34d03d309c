import logging
from pathlib import Path

import altair as alt
import streamlit as st

from ingestion.settings_loader import load_settings
from logic.badges import TitleBadge
from logic.calculator import SORT_COLUMNS
from logic.console import StaffingConsole
from logic.errors import ValidationError
from reporting.excel_export import export_workbook
from reporting.frames import staff_types_frame, staffing_frame, summary_frame

# --- logging setup ---
logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")

SORT_LABELS = {
    "staff_type_id": "StaffType_ID",
    "title": "Title",
    "ratio": "RatioStaffPatient",
    "census": "Census",
    "required_staff": "Staff_Needed",
}


def _census_key(row_id: int) -> str:
    return f"census_{row_id}"


def _sync_census_widgets(console) -> None:
    """Push calculator census values into the text inputs (runs inside callbacks only)."""
    for k in [k for k in st.session_state.keys() if str(k).startswith("census_")]:
        del st.session_state[k]
    for row in console.staffing_rows():
        st.session_state[_census_key(row.staff_type_id)] = "" if row.census is None else str(row.census)


def _get_console() -> StaffingConsole:
    if "console" not in st.session_state:
        console = StaffingConsole(load_settings("config/settings.yaml"))
        console.subscribe(lambda _calc: _sync_census_widgets(console))
        st.session_state.console = console
        st.session_state.messages = {}
        _sync_census_widgets(console)
    return st.session_state.console


def _report(section: str, error: str = "", success: str = "") -> None:
    st.session_state.messages[section] = (error, success)


# --- Callbacks (all mutations happen here, before widgets are rebuilt) ---

def on_add_staff_type():
    console = st.session_state.console
    try:
        st_new = console.add_staff_type(st.session_state.new_title, st.session_state.new_code)
    except ValidationError as exc:
        _report("types", error=exc.message)
        return
    _report("types", success=f"Added {st_new.title} ({st_new.code})")


def on_update_staff_type(staff_type_id: int):
    console = st.session_state.console
    try:
        st_upd = console.update_staff_type(
            staff_type_id,
            st.session_state[f"edit_title_{staff_type_id}"],
            st.session_state[f"edit_code_{staff_type_id}"],
        )
    except ValidationError as exc:
        _report("types", error=exc.message)
        return
    _report("types", success=f"Updated {st_upd.title} ({st_upd.code})")


def on_census_change(row_id: int):
    console = st.session_state.console
    key = _census_key(row_id)
    try:
        console.set_census(row_id, st.session_state[key])
    except ValidationError as exc:
        current = console.calculator.row(row_id).census
        st.session_state[key] = "" if current is None else str(current)
        _report("calc", error=exc.message)
        return
    _report("calc")


def on_add_row():
    console = st.session_state.console
    try:
        row = console.add_staffing_row(st.session_state.row_title, st.session_state.row_ratio)
    except ValidationError as exc:
        _report("calc", error=exc.message)
        return
    _report("calc", success=f"Added scratch row {row.title} ({row.ratio})")


def on_toggle_sort():
    st.session_state.console.toggle_sort(st.session_state.sort_column)


def _show_messages(section: str) -> None:
    error, success = st.session_state.messages.get(section, ("", ""))
    if error:
        st.error(error)
    elif success:
        st.success(success)


# --- App title ---
st.set_page_config(page_title="Staffing Console", layout="wide")
st.title("🗂️ Administration – Staff Types & Staffing Calculator")

console = _get_console()

tab1, tab2, tab3 = st.tabs(["👩‍⚕️ Staff Types", "🧮 Staffing Calculator", "📊 Summary"])

with tab1:
    st.subheader("👩‍⚕️ Staff Types")
    _show_messages("types")

    types_df = staff_types_frame(console.staff_types())
    styled_types = types_df.style.map(lambda v: TitleBadge.from_code(v).css(), subset=["Title_Code"])
    st.write(styled_types.to_html(), unsafe_allow_html=True)

    col1, col2 = st.columns(2)
    with col1:
        with st.form("add_staff_type", clear_on_submit=True):
            st.markdown("**Add Staff Type**")
            st.text_input("Title", placeholder="e.g., Registered Nurse", key="new_title")
            st.text_input("Title Code", placeholder="e.g., RN", key="new_code",
                          help="Short code for the title (2-4 characters)")
            st.form_submit_button("Add Staff Type", on_click=on_add_staff_type)

    with col2:
        st.markdown("**Edit Staff Type**")
        options = {t.id: t for t in console.staff_types()}
        chosen_id = st.selectbox(
            "Staff Type", list(options), format_func=lambda i: f"{i} – {options[i].title} ({options[i].code})"
        )
        if chosen_id is not None:
            chosen = options[chosen_id]
            with st.form(f"edit_staff_type_{chosen_id}"):
                st.text_input("Title", value=chosen.title, key=f"edit_title_{chosen_id}")
                st.text_input("Title Code", value=chosen.code, key=f"edit_code_{chosen_id}")
                st.form_submit_button("Update Staff Type", on_click=on_update_staff_type, args=(chosen_id,))

with tab2:
    st.subheader("🧮 Staffing Calculator")
    _show_messages("calc")

    sort = console.calculator.sort_state
    s1, s2 = st.columns([3, 1])
    s1.selectbox("Sort column", list(SORT_COLUMNS), format_func=SORT_LABELS.get, key="sort_column")
    s2.button("Toggle sort", on_click=on_toggle_sort)
    st.caption(
        f"Sorted by {SORT_LABELS[sort.column]} ({sort.direction})" if sort.direction
        else "Registry order"
    )

    header = st.columns([1, 2, 2, 2, 2])
    for col, label in zip(header, ["ID", "Title", "Ratio", "Census", "Staff Needed"]):
        col.markdown(f"**{label}**")

    for row in console.staffing_rows():
        c_id, c_title, c_ratio, c_census, c_needed = st.columns([1, 2, 2, 2, 2])
        c_id.write(row.staff_type_id)
        badge = TitleBadge.from_code(row.title)
        c_title.markdown(
            f"<span style='{badge.css()}; padding: 2px 10px; border-radius: 10px'>{row.title}</span>"
            + (" *(scratch)*" if row.scratch else ""),
            unsafe_allow_html=True,
        )
        c_ratio.write(f"👥 {row.ratio}")
        c_census.text_input(
            "Census", key=_census_key(row.staff_type_id), placeholder="Enter",
            label_visibility="collapsed", on_change=on_census_change, args=(row.staff_type_id,),
        )
        c_needed.write("-" if row.required_staff is None else f"🧮 {row.required_staff}")

    with st.form("add_row", clear_on_submit=True):
        st.markdown("**Add Calculator Row** (not added to Staff Types)")
        st.text_input("Title", placeholder="e.g., RT", key="row_title")
        st.text_input("Ratio (staff:patients)", placeholder="e.g., 1:5", key="row_ratio")
        st.form_submit_button("Add Row", on_click=on_add_row)

    # --- Staff needed chart ---
    plan_df = staffing_frame(console.staffing_rows())
    if plan_df["Census"].notna().any():
        st.subheader("📈 Census vs Staff Needed")
        chart_df = plan_df.dropna(subset=["Census"]).astype({"Census": "int64", "Staff_Needed": "int64"})
        melted = chart_df.melt(
            id_vars="Title", value_vars=["Census", "Staff_Needed"], var_name="Measure", value_name="Count"
        )

        chart_type = st.radio("Chart Style", ["Grouped", "Staff Needed only"], horizontal=True, index=0)
        if chart_type == "Grouped":
            chart = (
                alt.Chart(melted)
                .mark_bar()
                .encode(
                    x="Title:N",
                    xOffset="Measure:N",
                    y="Count:Q",
                    color="Measure:N",
                    tooltip=["Title:N", "Measure:N", "Count:Q"],
                )
                .properties(height=300)
            )
        else:
            chart = (
                alt.Chart(chart_df)
                .mark_bar()
                .encode(
                    x="Title:N",
                    y="Staff_Needed:Q",
                    tooltip=["Title:N", "RatioStaffPatient:N", "Census:Q", "Staff_Needed:Q"],
                )
                .properties(height=300)
            )
        st.altair_chart(chart, use_container_width=True)
        st.caption("Staff Needed = ceil(Census / patients per staff member) for each staff type.")

with tab3:
    st.subheader("📊 Summary")
    st.table(summary_frame(console))

    # --- Download results as Excel ---
    out_path = Path("data") / "staffing_outputs_streamlit.xlsx"
    export_workbook(console, out_path)
    with open(out_path, "rb") as f:
        st.download_button(
            label="📥 Download Staffing Workbook (Excel)",
            data=f,
            file_name="staffing_outputs.xlsx",
            mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        )
