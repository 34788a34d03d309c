from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Mapping, Optional

from logic.errors import InvalidFormat

RATIO_PATTERN = re.compile(r"^\d+:\d+$")

DEFAULT_RATIOS = {
    "CNA": "1:3",
    "LPN": "1:2",
    "RN": "1:1",
    "UC": "1:50",
    "MA": "1:4",
}
FALLBACK_RATIO = "1:4"


@dataclass(frozen=True)
class Ratio:
    numerator: int
    denominator: int

    def __str__(self) -> str:
        return f"{self.numerator}:{self.denominator}"


def parse_ratio(text: str) -> Ratio:
    """
    Parse a staff:patient ratio string such as "1:3".
    The denominator is the number of patients one staff member covers and must be > 0.
    """
    value = str(text).strip() if text is not None else ""
    if not RATIO_PATTERN.match(value):
        raise InvalidFormat("Ratio must be in format 'number:number'")
    try:
        numerator, denominator = (int(part) for part in value.split(":"))
    except ValueError as exc:
        raise InvalidFormat("Ratio must be in format 'number:number'") from exc
    if denominator <= 0:
        raise InvalidFormat("Ratio patient count must be greater than zero")
    return Ratio(numerator, denominator)


def resolve_ratio(code: str,
                  ratios: Optional[Mapping[str, str]] = None,
                  fallback: str = FALLBACK_RATIO) -> str:
    """Default ratio string for a staff-type code; unknown codes get the fallback."""
    table = DEFAULT_RATIOS if ratios is None else ratios
    return table.get(str(code).strip().upper(), fallback)


def staff_needed(census: Optional[int], ratio: Ratio) -> Optional[int]:
    """
    Standard staffing formula:
        Staff Needed = ceil(Census / patients per staff member)
    """
    if census is None:
        return None
    # integer ceil, exact for any census size
    return -(-census // ratio.denominator)
