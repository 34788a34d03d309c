from __future__ import annotations
from pathlib import Path

import pandas as pd

# Header names vary between sheets; we normalize.
CANDIDATES = {
    "code":   {"code", "title code", "title_code", "role", "staff type", "position"},
    "census": {"census", "projected census", "projected_census", "patients"},
}


def _pick(df: pd.DataFrame, keys: set[str]) -> str | None:
    lower = {str(c).strip().lower(): c for c in df.columns}
    for k in keys:
        if k in lower:
            return lower[k]
    return None


def load_census_inputs(path: str, sheet_name: str = "Census Input") -> pd.DataFrame:
    """
    Read census counts per staff-type code from .xlsx (one sheet) or .csv.
    Output columns: Code (upper-case str), Census (str, as typed)

    Census stays raw text so the calculator applies its own validation.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Could not find census file '{path}'.")

    if p.suffix.lower() == ".csv":
        raw = pd.read_csv(p, dtype=str, keep_default_na=False)
    else:
        raw = pd.read_excel(p, sheet_name=sheet_name, dtype=str, keep_default_na=False)

    code_col = _pick(raw, CANDIDATES["code"])
    census_col = _pick(raw, CANDIDATES["census"])
    if not code_col or not census_col:
        raise ValueError(f"Census input must contain Code and Census columns. Found: {list(raw.columns)}")

    df = raw[[code_col, census_col]].copy()
    df.columns = ["Code", "Census"]
    df["Code"] = df["Code"].astype(str).str.strip().str.upper()
    df["Census"] = df["Census"].astype(str).str.strip()

    # Drop rows without a code
    df = df[df["Code"] != ""].reset_index(drop=True)
    return df
