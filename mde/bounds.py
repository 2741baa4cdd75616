"""Axis-aligned viewing window shared by the solver and its items."""

from dataclasses import dataclass

from mde.features import fmt_num


@dataclass
class Bounds:
    left: float = 0.0
    right: float = 0.0
    top: float = 0.0
    bottom: float = 0.0

    def set_bounds(self, left, right=None, top=None, bottom=None) -> None:
        """Copy another Bounds, or take four explicit edges."""
        if isinstance(left, Bounds):
            left, right, top, bottom = left.left, left.right, left.top, left.bottom
        self.left = float(left)
        self.right = float(right)
        self.top = float(top)
        self.bottom = float(bottom)

    def maximize(self, other: "Bounds") -> bool:
        """Grow to the union with *other*; True when any edge moved."""
        changed = False
        if other.left < self.left:
            self.left = other.left
            changed = True
        if other.right > self.right:
            self.right = other.right
            changed = True
        if other.top > self.top:
            self.top = other.top
            changed = True
        if other.bottom < self.bottom:
            self.bottom = other.bottom
            changed = True
        return changed

    def copy(self) -> "Bounds":
        return Bounds(self.left, self.right, self.top, self.bottom)

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.top - self.bottom

    def describe(self, abscissa: str = "x", ordinate: str = "y") -> str:
        """``x = <left> to <right> and y = <bottom> to <top>``."""
        return (f"{abscissa} = {fmt_num(self.left)} to {fmt_num(self.right)} and "
                f"{ordinate} = {fmt_num(self.bottom)} to {fmt_num(self.top)}")

    def as_dict(self) -> dict:
        return {"left": self.left, "right": self.right, "top": self.top, "bottom": self.bottom}


def default_bounds(value: float = 10.0) -> Bounds:
    return Bounds(-value, value, value, -value)
