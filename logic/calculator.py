"""
Staffing Calculator
- One row per registered staff type, rebuilt in full whenever the registry changes
- Census is operator input; Staff Needed is always derived as ceil(Census / patients per staff)
- Scratch rows can be added locally without touching the registry (dropped on the next rebuild)
- Three-state column sort: ascending -> descending -> registry order
"""

from __future__ import annotations
import logging
import re
from dataclasses import dataclass, replace
from typing import Dict, List, Mapping, Optional, Tuple

from logic.errors import DuplicateEntry, InvalidNumber, MissingField
from logic.observable import Observable
from logic.ratios import FALLBACK_RATIO, Ratio, parse_ratio, resolve_ratio, staff_needed
from logic.registry import StaffTypeRegistry

logger = logging.getLogger(__name__)

SORT_COLUMNS = ("staff_type_id", "title", "ratio", "census", "required_staff")
_CENSUS_PATTERN = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class StaffingRow:
    staff_type_id: int
    title: str
    ratio: str
    ratio_numerator: int
    ratio_denominator: int
    census: Optional[int] = None
    scratch: bool = False

    @classmethod
    def build(cls, staff_type_id: int, title: str, ratio: str,
              census: Optional[int] = None, scratch: bool = False) -> "StaffingRow":
        parsed = parse_ratio(ratio)
        return cls(staff_type_id, title, str(parsed), parsed.numerator, parsed.denominator, census, scratch)

    @property
    def parsed_ratio(self) -> Ratio:
        return Ratio(self.ratio_numerator, self.ratio_denominator)

    @property
    def required_staff(self) -> Optional[int]:
        return staff_needed(self.census, self.parsed_ratio)


@dataclass(frozen=True)
class SortState:
    column: str = "staff_type_id"
    direction: Optional[str] = None  # "asc" | "desc" | None


def parse_census(raw_value) -> Optional[int]:
    """Blank clears the census; anything other than a whole number >= 0 is rejected."""
    text = "" if raw_value is None else str(raw_value).strip()
    if text == "":
        return None
    if not _CENSUS_PATTERN.fullmatch(text):
        raise InvalidNumber("Census must be a non-negative whole number")
    try:
        return int(text)
    except ValueError as exc:
        # digit strings past the interpreter's conversion limit
        raise InvalidNumber("Census must be a non-negative whole number") from exc


class StaffingCalculator(Observable):

    def __init__(self,
                 registry: StaffTypeRegistry,
                 ratios: Optional[Mapping[str, str]] = None,
                 fallback_ratio: str = FALLBACK_RATIO,
                 carry_forward_census: bool = True):
        super().__init__()
        self._registry = registry
        self._ratios = ratios
        self._fallback_ratio = fallback_ratio
        self.carry_forward_census = carry_forward_census
        self._rows: List[StaffingRow] = []
        self._scratch_ids: List[int] = []
        self._sort = SortState()
        self._unsubscribe = registry.subscribe(self._on_registry_change)
        self._regenerate()

    # ---------- queries ----------

    def rows(self) -> Tuple[StaffingRow, ...]:
        return tuple(self._rows)

    def row(self, staff_type_id: int) -> StaffingRow:
        return self._rows[self._index_of(staff_type_id)]

    @property
    def sort_state(self) -> SortState:
        return self._sort

    # ---------- commands ----------

    def set_census(self, staff_type_id: int, raw_value) -> StaffingRow:
        idx = self._index_of(staff_type_id)
        try:
            census = parse_census(raw_value)
        except InvalidNumber:
            logger.warning("Rejected census %r for row %s", raw_value, staff_type_id)
            raise
        self._rows[idx] = replace(self._rows[idx], census=census)
        logger.info("Census for row %s set to %s", staff_type_id, census)
        self._notify()
        return self._rows[idx]

    def add_row(self, title: str, ratio: str) -> StaffingRow:
        """Calculator-local row; the registry is not touched."""
        title = str(title or "").strip()
        ratio = str(ratio or "").strip()
        if not title or not ratio:
            raise MissingField("Title and Ratio are required")
        parsed = parse_ratio(ratio)
        if any(r.title.lower() == title.lower() for r in self._rows):
            raise DuplicateEntry("This staff type already exists")

        new_id = max((r.staff_type_id for r in self._rows), default=0) + 1
        row = StaffingRow.build(new_id, title, str(parsed), scratch=True)
        self._rows.append(row)
        self._scratch_ids.append(new_id)
        logger.info("Added scratch row %s (%s) id=%s", title, row.ratio, new_id)
        self._notify()
        return row

    def toggle_sort(self, column: str) -> SortState:
        if column not in SORT_COLUMNS:
            raise ValueError(f"Sort column must be one of {list(SORT_COLUMNS)}.")

        direction: Optional[str] = "asc"
        if self._sort.column == column:
            if self._sort.direction == "asc":
                direction = "desc"
            elif self._sort.direction == "desc":
                direction = None
        self._sort = SortState(column, direction)

        if direction is None:
            self._rows = self._in_base_order(self._rows)
        else:
            def key(r: StaffingRow):
                value = getattr(r, column)
                return (value is None, value)
            self._rows = sorted(self._rows, key=key, reverse=(direction == "desc"))

        self._notify()
        return self._sort

    def detach(self) -> None:
        self._unsubscribe()

    # ---------- internals ----------

    def _index_of(self, staff_type_id: int) -> int:
        for i, r in enumerate(self._rows):
            if r.staff_type_id == staff_type_id:
                return i
        raise KeyError(f"No staffing row for id {staff_type_id}")

    def _in_base_order(self, rows: List[StaffingRow]) -> List[StaffingRow]:
        order = [st.id for st in self._registry.list()] + self._scratch_ids
        by_id = {r.staff_type_id: r for r in rows}
        return [by_id[i] for i in order if i in by_id]

    def _on_registry_change(self, _registry) -> None:
        self._regenerate()

    def _regenerate(self) -> None:
        previous: Dict[int, Optional[int]] = {}
        if self.carry_forward_census:
            previous = {r.staff_type_id: r.census for r in self._rows if not r.scratch}

        self._rows = [
            StaffingRow.build(
                st.id,
                st.code,
                resolve_ratio(st.code, self._ratios, self._fallback_ratio),
                census=previous.get(st.id),
            )
            for st in self._registry.list()
        ]
        self._scratch_ids = []
        self._sort = SortState()
        logger.info("Regenerated %d staffing rows", len(self._rows))
        self._notify()
