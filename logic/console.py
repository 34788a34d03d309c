from __future__ import annotations
from typing import Callable, Optional, Tuple

from logic.calculator import SortState, StaffingCalculator, StaffingRow
from logic.ratios import FALLBACK_RATIO
from logic.registry import DEFAULT_STAFF_TYPES, StaffType, StaffTypeRegistry


class StaffingConsole:
    """
    Facade used by the Streamlit page and the CLI run.
    Queries return read-only snapshots; commands return the new record or raise a ValidationError.
    """

    def __init__(self, settings: Optional[dict] = None):
        settings = settings or {}
        self.registry = StaffTypeRegistry(seed=settings.get("staff_types", DEFAULT_STAFF_TYPES))
        self.calculator = StaffingCalculator(
            self.registry,
            ratios=settings.get("default_ratios"),
            fallback_ratio=settings.get("fallback_ratio", FALLBACK_RATIO),
            carry_forward_census=settings.get("carry_forward_census", True),
        )

    def staff_types(self) -> Tuple[StaffType, ...]:
        return self.registry.list()

    def staffing_rows(self) -> Tuple[StaffingRow, ...]:
        return self.calculator.rows()

    def add_staff_type(self, title: str, code: str) -> StaffType:
        return self.registry.add(title, code)

    def update_staff_type(self, staff_type_id: int, title: str, code: str) -> StaffType:
        return self.registry.update(staff_type_id, title, code)

    def add_staffing_row(self, title: str, ratio: str) -> StaffingRow:
        return self.calculator.add_row(title, ratio)

    def set_census(self, staff_type_id: int, raw_value) -> StaffingRow:
        return self.calculator.set_census(staff_type_id, raw_value)

    def toggle_sort(self, column: str) -> SortState:
        return self.calculator.toggle_sort(column)

    def subscribe(self, listener: Callable[[object], None]) -> Callable[[], None]:
        """Listener fires on any registry or calculator change (calculator regenerates on registry changes)."""
        return self.calculator.subscribe(listener)
