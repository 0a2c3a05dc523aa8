"""Per-age percentile bands across Monte Carlo trials.

All percentiles use linear interpolation between order statistics: for ``n``
sorted values the fractional rank of percentile ``p`` is ``(p / 100) * (n - 1)``
and the result interpolates between the floor and ceiling ranks.  This is
numpy's default ``"linear"`` method.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, NamedTuple, Sequence

import numpy as np

BAND_PERCENTILES = (10, 20, 50, 80, 90)


class PercentileBand(NamedTuple):
    p10: float
    p20: float
    p50: float
    p80: float
    p90: float


@dataclass(frozen=True)
class PercentileBands:
    """Five percentile series, one value per age."""

    p10: List[float] = field(default_factory=list)
    p20: List[float] = field(default_factory=list)
    p50: List[float] = field(default_factory=list)
    p80: List[float] = field(default_factory=list)
    p90: List[float] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.p50)

    def at(self, index: int) -> PercentileBand:
        return PercentileBand(self.p10[index], self.p20[index], self.p50[index],
                              self.p80[index], self.p90[index])

    def to_dict(self) -> Dict[str, List[float]]:
        return {f"p{p}": list(getattr(self, f"p{p}")) for p in BAND_PERCENTILES}


def calculate_percentile(values: Sequence[float], percentile: float) -> float:
    """Return a single percentile of ``values`` (0 = min, 100 = max)."""
    if len(values) == 0:
        raise ValueError("cannot take a percentile of an empty sequence")
    if not 0 <= percentile <= 100:
        raise ValueError("percentile must be between 0 and 100")
    return float(np.percentile(np.asarray(values, dtype=float), percentile))


def calculate_percentiles(runs) -> PercentileBands:
    """Compute p10/p20/p50/p80/p90 for every age column.

    Parameters
    ----------
    runs : array-like
        ``runs[trial][age_index]``; every trial must cover the same ages.

    Returns
    -------
    PercentileBands
        Empty series when ``runs`` holds no trials.
    """
    stacked = np.asarray(runs, dtype=float)
    if stacked.size == 0:
        return PercentileBands()
    if stacked.ndim != 2:
        raise ValueError("runs must be a trials x ages matrix of equal-length series")

    bands = np.percentile(stacked, BAND_PERCENTILES, axis=0)  # 5 x ages
    # p10 <= p20 <= ... must hold even where interpolation rounds differently
    bands = np.maximum.accumulate(bands, axis=0)

    return PercentileBands(*(row.tolist() for row in bands))


__all__ = [
    "BAND_PERCENTILES",
    "PercentileBand",
    "PercentileBands",
    "calculate_percentile",
    "calculate_percentiles",
]
