from __future__ import annotations
from enum import Enum


class TitleBadge(Enum):
    """Display colours for staff-type codes: (background, foreground) hex."""

    RN = ("DBEAFE", "1E40AF")
    LPN = ("DCFCE7", "166534")
    CNA = ("F3E8FF", "6B21A8")
    UC = ("FFEDD5", "9A3412")
    MA = ("FEF9C3", "854D0E")
    OTHER = ("F3F4F6", "1F2937")

    @property
    def background(self) -> str:
        return self.value[0]

    @property
    def foreground(self) -> str:
        return self.value[1]

    @classmethod
    def from_code(cls, code: str) -> "TitleBadge":
        key = str(code or "").strip().upper()
        if key in cls.__members__ and key != "OTHER":
            return cls[key]
        return cls.OTHER

    def css(self) -> str:
        return f"background-color: #{self.background}; color: #{self.foreground}"
