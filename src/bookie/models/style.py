"""Text style snapshots."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator

FontStyle = Literal["", "B", "I", "BI"]
Alignment = Literal["L", "C", "R", "J"]


def normalize_style(value: str | None) -> str:
    """Canonical style flags: "", "B", "I" or "BI" (underline is drawn separately)."""
    value = (value or "").upper()
    return ("B" if "B" in value else "") + ("I" if "I" in value else "")


class TextStyle(BaseModel):
    """Immutable font snapshot used to save and restore renderer state."""

    model_config = ConfigDict(frozen=True)

    font_family: str
    style: FontStyle = ""
    size_pt: float = 12.0
    alignment: Alignment = "L"

    @field_validator("style", mode="before")
    @classmethod
    def _canonical_style(cls, value: str | None) -> str:
        # fpdf2 reports bold-italic as "BI" or "IB" depending on call order
        return normalize_style(value)

    @property
    def is_bold(self) -> bool:
        return "B" in self.style

    @property
    def is_italic(self) -> bool:
        return "I" in self.style

    def with_flag(self, flag: Literal["B", "I"]) -> "TextStyle":
        """Return a copy with bold or italic switched on."""
        return self.model_copy(update={"style": normalize_style(self.style + flag)})
