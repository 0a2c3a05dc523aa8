"""Outcome of a Monte Carlo run.

:class:`SimulationResult` is created once by the orchestrator and never
mutated.  Reporting layers read the percentile bands and success rate from it;
``to_frame`` gives the same data as a table indexed by age.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

import pandas as pd

from .params import SimulationParams
from .percentiles import BAND_PERCENTILES, PercentileBand, PercentileBands


@dataclass(frozen=True)
class SimulationResult:
    ages: List[int]
    asset_percentiles: PercentileBands
    spending_percentiles: PercentileBands
    success_rate: float
    params: SimulationParams
    success_count: int = 0
    trials: int = 0

    @property
    def median_terminal_assets(self) -> float:
        return self.asset_percentiles.p50[-1] if self.ages else 0.0

    def band_at(self, index: int) -> Dict[str, PercentileBand]:
        return {
            "assets": self.asset_percentiles.at(index),
            "spending": self.spending_percentiles.at(index),
        }

    def index_of_age(self, age: int) -> int:
        if age not in self.ages:
            raise ValueError(f"age {age} is outside the projection {self.ages[0]}-{self.ages[-1]}")
        return age - self.ages[0]

    def exhaustion_age(self) -> Optional[int]:
        """First age at which the pessimistic (p10) asset path is empty."""
        for age, value in zip(self.ages, self.asset_percentiles.p10):
            if value <= 0:
                return age
        return None

    def to_frame(self) -> pd.DataFrame:
        data = {}
        for prefix, bands in (("assets", self.asset_percentiles), ("spending", self.spending_percentiles)):
            for p in BAND_PERCENTILES:
                data[f"{prefix}_p{p}"] = getattr(bands, f"p{p}")
        df = pd.DataFrame(data, index=pd.Index(self.ages, name="age"))
        return df

    def to_dict(self) -> Dict:
        return {
            "ages": list(self.ages),
            "asset_percentiles": self.asset_percentiles.to_dict(),
            "spending_percentiles": self.spending_percentiles.to_dict(),
            "success_rate": self.success_rate,
            "success_count": self.success_count,
            "trials": self.trials,
            "params": self.params.to_dict(),
        }

    def __repr__(self) -> str:
        return (f"SimulationResult(trials={self.trials}, years={len(self.ages)}, "
                f"success_rate={self.success_rate:.1f})")


__all__ = ["SimulationResult"]
