from __future__ import annotations

from typing import NamedTuple, Sequence


class RGB(NamedTuple):
    """An 8-bit per channel colour."""

    r: int
    g: int
    b: int

    @classmethod
    def from_hex(cls, text: str) -> "RGB":
        """Parse ``"ff6680"`` or ``"#ff6680"``."""
        digits = text.strip().lstrip("#")
        if len(digits) != 6:
            raise ValueError(f"Expected 6 hex digits, got {text!r}")
        try:
            vals = [int(digits[k : k + 2], 16) for k in range(0, 6, 2)]
        except ValueError as exc:
            raise ValueError(f"Invalid hex colour {text!r}") from exc
        return cls(*vals)

    @classmethod
    def from_values(cls, vals: Sequence[int]) -> "RGB":
        return cls(int(vals[0]), int(vals[1]), int(vals[2]))

    def to_hex(self) -> str:
        return f"{self.r:02x}{self.g:02x}{self.b:02x}"
