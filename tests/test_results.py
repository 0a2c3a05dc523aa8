"""Tests for the result bundle and its table export."""

import pytest

from retirement_sim.calculators.params import DEFAULT_PARAMS
from retirement_sim.calculators.percentiles import PercentileBands
from retirement_sim.calculators.results import SimulationResult


def _result(p10=(100.0, 50.0, 0.0), success_rate=90.0):
    assets = PercentileBands(
        p10=list(p10),
        p20=[150.0, 100.0, 50.0],
        p50=[200.0, 150.0, 100.0],
        p80=[250.0, 220.0, 200.0],
        p90=[300.0, 280.0, 260.0],
    )
    spending = PercentileBands(*([[10.0, 11.0, 12.0]] * 5))
    params = DEFAULT_PARAMS.with_updates(current_age=60, retirement_age=60,
                                         legal_pension_age=60, horizon_age=62)
    return SimulationResult(
        ages=[60, 61, 62],
        asset_percentiles=assets,
        spending_percentiles=spending,
        success_rate=success_rate,
        params=params,
        success_count=9,
        trials=10,
    )


def test_to_frame_is_indexed_by_age():
    df = _result().to_frame()
    assert df.index.name == "age"
    assert list(df.index) == [60, 61, 62]
    assert list(df.columns) == [
        "assets_p10", "assets_p20", "assets_p50", "assets_p80", "assets_p90",
        "spending_p10", "spending_p20", "spending_p50", "spending_p80", "spending_p90",
    ]
    assert df.loc[61, "assets_p50"] == 150.0
    assert df.loc[62, "spending_p90"] == 12.0


def test_exhaustion_age_reads_pessimistic_path():
    assert _result().exhaustion_age() == 62
    assert _result(p10=(100.0, 90.0, 80.0)).exhaustion_age() is None


def test_band_lookup():
    band = _result().band_at(1)
    assert band["assets"].p50 == 150.0
    assert band["spending"].p10 == 11.0
    assert _result().index_of_age(62) == 2
    with pytest.raises(ValueError):
        _result().index_of_age(70)


def test_summary_accessors():
    result = _result()
    assert result.median_terminal_assets == 100.0
    data = result.to_dict()
    assert data["success_rate"] == 90.0
    assert data["asset_percentiles"]["p90"] == [300.0, 280.0, 260.0]
    assert data["params"]["horizon_age"] == 62
    assert "success_rate=90.0" in repr(result)
