"""Label model — a coloured grouping tag referenced by projects."""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator

from timeledger.models.project import new_record_id

_HEX_RE = re.compile(r"^[0-9A-Fa-f]+$")


def normalize_hex_color(value: str) -> str:
    """Normalize ``RGB``, ``RRGGBB`` or ``AARRGGBB`` (``#`` optional) to ``#RRGGBB``.

    Raises ``ValueError`` for anything else.
    """
    digits = value.strip().lstrip("#")
    if not _HEX_RE.match(digits):
        raise ValueError(f"Not a hex colour: {value!r}")
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    elif len(digits) == 8:
        digits = digits[2:]  # drop alpha
    elif len(digits) != 6:
        raise ValueError(f"Hex colour must have 3, 6 or 8 digits: {value!r}")
    return f"#{digits.upper()}"


class Label(BaseModel):
    """Immutable label record. Rename/recolor produce a copy."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    label_id: str = Field(default_factory=new_record_id, alias="id")
    title: str
    color: str = "#000000"

    @field_validator("color")
    @classmethod
    def _check_color(cls, value: str) -> str:
        return normalize_hex_color(value)
