"""Dimensionless relative quantities.

A Percentage stores a single ratio (0.2 means 20%) and offers two
views of it.  Every relative value that crosses a module boundary
(coefficient of variation, improvement) is passed as a Percentage so
that a raw ``20.0`` can never be mistaken for ``0.2``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True, order=True)
class Percentage:
    """A relative quantity stored as a ratio.

    Equality and ordering compare the underlying ratio only.
    """

    ratio: float

    ZERO: ClassVar[Percentage]

    @classmethod
    def from_ratio(cls, numerator: float, denominator: float) -> Percentage:
        """Build from ``numerator / denominator``.

        A zero denominator yields ``Percentage.ZERO`` instead of
        raising.
        """
        if denominator == 0:
            return cls(0.0)
        return cls(numerator / denominator)

    @classmethod
    def from_percent(cls, percent: float) -> Percentage:
        """Build from a percent value (``20.0`` for 20%)."""
        return cls(percent / 100)

    @property
    def as_ratio(self) -> float:
        return self.ratio

    @property
    def as_percent(self) -> float:
        return self.ratio * 100

    def format(self, digits: int = 1) -> str:
        """Render as a percent string, e.g. ``"12.3%"``."""
        return f"{self.as_percent:.{digits}f}%"

    def __str__(self) -> str:
        return self.format()


Percentage.ZERO = Percentage(0.0)
