"""
Staff Type Registry
- Single owned list of staff types (job categories) shared by every consumer
- Add/update validate first, then mutate, then notify subscribers synchronously
- Ids are max existing id + 1 (or 1 when empty); records are never deleted
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional, Tuple

from logic.errors import DuplicateEntry, InvalidFormat, MissingField
from logic.observable import Observable

logger = logging.getLogger(__name__)

CODE_MIN_LEN = 2
CODE_MAX_LEN = 4

DEFAULT_STAFF_TYPES = [
    {"title": "Registered Nurse", "code": "RN"},
    {"title": "Licensed Practical Nurse", "code": "LPN"},
    {"title": "Certified Nursing Assistant", "code": "CNA"},
    {"title": "Unit Coordinator", "code": "UC"},
    {"title": "Medical Assistant", "code": "MA"},
]


@dataclass(frozen=True)
class StaffType:
    id: int
    title: str
    code: str


class StaffTypeRegistry(Observable):

    def __init__(self, seed: Optional[Iterable[Mapping[str, str]]] = None):
        super().__init__()
        self._types: List[StaffType] = []
        for entry in seed or []:
            self._types.append(self._validated(entry.get("title", ""), entry.get("code", "")))

    def list(self) -> Tuple[StaffType, ...]:
        return tuple(self._types)

    def __len__(self) -> int:
        return len(self._types)

    def get(self, staff_type_id: int) -> StaffType:
        for st in self._types:
            if st.id == staff_type_id:
                return st
        raise KeyError(f"Unknown staff type id {staff_type_id}")

    def find_by_code(self, code: str) -> Optional[StaffType]:
        key = str(code).strip().lower()
        return next((st for st in self._types if st.code.lower() == key), None)

    def add(self, title: str, code: str) -> StaffType:
        staff_type = self._validated(title, code)
        self._types.append(staff_type)
        logger.info("Added staff type %s (%s) id=%s", staff_type.title, staff_type.code, staff_type.id)
        self._notify()
        return staff_type

    def update(self, staff_type_id: int, title: str, code: str) -> StaffType:
        """Replace title/code for an existing id; same validation as add, ignoring the record itself."""
        idx = next((i for i, st in enumerate(self._types) if st.id == staff_type_id), None)
        if idx is None:
            raise KeyError(f"Unknown staff type id {staff_type_id}")
        staff_type = self._validated(title, code, editing_id=staff_type_id)
        self._types[idx] = staff_type
        logger.info("Updated staff type id=%s to %s (%s)", staff_type_id, staff_type.title, staff_type.code)
        self._notify()
        return staff_type

    def _next_id(self) -> int:
        return max((st.id for st in self._types), default=0) + 1

    def _validated(self, title: str, code: str, editing_id: Optional[int] = None) -> StaffType:
        title = str(title or "").strip()
        code = str(code or "").strip()
        if not title or not code:
            logger.warning("Rejected staff type: missing title or code")
            raise MissingField("Title and Code are required")
        if not CODE_MIN_LEN <= len(code) <= CODE_MAX_LEN:
            logger.warning("Rejected staff type code %r: bad length", code)
            raise InvalidFormat(f"Code must be {CODE_MIN_LEN}-{CODE_MAX_LEN} characters")

        for st in self._types:
            if st.id == editing_id:
                continue
            if st.code.lower() == code.lower() or st.title.lower() == title.lower():
                logger.warning("Rejected duplicate staff type %s (%s)", title, code)
                raise DuplicateEntry("This staff type or code already exists")

        new_id = editing_id if editing_id is not None else self._next_id()
        return StaffType(id=new_id, title=title, code=code.upper())
