import logging
import sys
from pathlib import Path
from typing import Optional

from ingestion.census_loader import load_census_inputs
from ingestion.settings_loader import load_settings
from logic.console import StaffingConsole
from logic.errors import ValidationError
from reporting.excel_export import export_workbook
from reporting.frames import staff_types_frame, staffing_frame

SETTINGS_PATH = "config/settings.yaml"
CENSUS_FILENAMES = ["census_input.xlsx", "census_input.csv"]
OUTPUT_FILENAME = "staffing_outputs.xlsx"


def _resolve_census_path() -> Optional[Path]:
    here = Path(__file__).resolve().parent
    candidates = [here / "data" / name for name in CENSUS_FILENAMES] + [here / name for name in CENSUS_FILENAMES]
    for p in candidates:
        if p.exists():
            return p
    return None


def apply_census(console: StaffingConsole, census_df) -> int:
    """Apply Code/Census rows to the calculator; returns how many were applied."""
    applied = 0
    for _, row in census_df.iterrows():
        staff_type = console.registry.find_by_code(row["Code"])
        if staff_type is None:
            print(f"⚠️  Skipping census for unknown code {row['Code']!r}")
            continue
        try:
            console.set_census(staff_type.id, row["Census"])
        except ValidationError as exc:
            print(f"⚠️  Skipping census {row['Census']!r} for {row['Code']}: {exc.message}")
            continue
        applied += 1
    return applied


def run_pipeline(census_path: Optional[str] = None,
                 settings_path: str = SETTINGS_PATH,
                 out_path: Optional[str] = None) -> Path:
    settings = load_settings(settings_path)
    console = StaffingConsole(settings)
    print(f"⚙️  Loaded {len(console.staff_types())} staff types from {settings_path}")

    census_file = Path(census_path) if census_path else _resolve_census_path()
    source = ""
    if census_file is None:
        print("⚠️  No census input found. Staff Needed will be blank.")
    else:
        census_df = load_census_inputs(str(census_file))
        applied = apply_census(console, census_df)
        source = str(census_file)
        print(f"📘 Applied {applied} census values from {census_file}")

    target = Path(out_path) if out_path else Path(__file__).resolve().parent / "data" / OUTPUT_FILENAME
    export_workbook(console, target, source=source)
    print(f"✅ Wrote {target}")

    # --- Preview ---
    print("🧑‍⚕️ Staff Types (preview):")
    print(staff_types_frame(console.staff_types()).head(10))
    print("\n🧮 Staffing Calculator (preview):")
    print(staffing_frame(console.staffing_rows()).head(10))
    return target


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    run_pipeline(sys.argv[1] if len(sys.argv) > 1 else None)
