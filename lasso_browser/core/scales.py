from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence, Tuple

import numpy as np
import plotly.express as px

# category10, same order as d3.schemeCategory10
DEFAULT_PALETTE: Tuple[str, ...] = tuple(px.colors.qualitative.D3)


@dataclass(frozen=True)
class LinearScale:
    """
    Linear map from a data domain onto a screen range.

    A degenerate domain (lo == hi) collapses every value onto the midpoint of
    the range instead of dividing by zero. NaN maps to NaN.
    """
    domain: Tuple[float, float]
    range: Tuple[float, float]

    @classmethod
    def fit(cls, values: Iterable[float], range_: Tuple[float, float]) -> LinearScale:
        """Fit the domain to [min, max] of the finite values; no finite value gives [0, 1]."""
        arr = np.asarray(list(values), dtype=float)
        finite = arr[np.isfinite(arr)]
        if finite.size == 0:
            return cls((0.0, 1.0), range_)
        return cls((float(finite.min()), float(finite.max())), range_)

    @property
    def is_degenerate(self) -> bool:
        return self.domain[0] == self.domain[1]

    def __call__(self, value):
        d0, d1 = self.domain
        r0, r1 = self.range
        v = np.asarray(value, dtype=float)
        if self.is_degenerate:
            out = np.where(np.isnan(v), np.nan, (r0 + r1) / 2.0)
        else:
            out = r0 + (v - d0) / (d1 - d0) * (r1 - r0)
        return float(out) if out.ndim == 0 else out

    def invert(self, screen: float) -> float:
        """Data value drawn at a screen position (the domain start if degenerate)."""
        d0, d1 = self.domain
        r0, r1 = self.range
        return d0 + (screen - r0) / (r1 - r0) * (d1 - d0)

    def ticks(self, count: int = 10) -> List[float]:
        """Round tick values inside the domain, roughly `count` of them (none if unbounded)."""
        lo, hi = self.domain
        if not (math.isfinite(lo) and math.isfinite(hi)):
            return []
        if self.is_degenerate:
            return [lo]
        step = _tick_step(lo, hi, count)
        start = math.ceil(lo / step)
        stop = math.floor(hi / step)
        # Multiply rather than accumulate to keep ticks free of float drift
        return [round(i * step, 12) for i in range(start, stop + 1)]


def _tick_step(lo: float, hi: float, count: int) -> float:
    raw = (hi - lo) / max(count, 1)
    power = 10 ** math.floor(math.log10(raw))
    error = raw / power
    if error >= math.sqrt(50):
        return power * 10
    if error >= math.sqrt(10):
        return power * 5
    if error >= math.sqrt(2):
        return power * 2
    return power


@dataclass
class OrdinalColorScale:
    """
    Category → color lookup.

    Colors are handed out in first-encountered order and cycle through the
    palette once it is exhausted.
    """
    palette: Sequence[str] = DEFAULT_PALETTE
    _assigned: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def fit(cls, categories: Iterable[str], palette: Sequence[str] = DEFAULT_PALETTE) -> OrdinalColorScale:
        scale = cls(palette=palette)
        for c in categories:
            scale(c)
        return scale

    def __call__(self, category: str) -> str:
        color = self._assigned.get(category)
        if color is None:
            color = self.palette[len(self._assigned) % len(self.palette)]
            self._assigned[category] = color
        return color

    @property
    def domain(self) -> List[str]:
        return list(self._assigned)

    def items(self) -> List[Tuple[str, str]]:
        return list(self._assigned.items())
