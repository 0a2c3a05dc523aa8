# components/charts.py
# Plotly figures over a SimulationResult.
# Every helper returns a go.Figure; callers decide how to show or export it.

from typing import List, Sequence

import plotly.graph_objects as go

from ..calculators.percentiles import PercentileBands
from ..calculators.results import SimulationResult

_HOVER = "Age %{x}<br>€%{y:,.0f}<extra></extra>"
_MEDIAN_COLOR = "#18453B"

# (upper, lower, fill, legend label), drawn outermost first
_FANS = (
    ("p90", "p10", "rgba(24,69,59,0.15)", "10–90%"),
    ("p80", "p20", "rgba(24,69,59,0.30)", "20–80%"),
)

_GAUGE_STEPS = (
    (0, 60, "#ef4444"),
    (60, 80, "#f59e0b"),
    (80, 100, "#22c55e"),
)


def _fit(series: Sequence[float], n: int) -> List[float]:
    """Pad with zeros or trim so a band lines up with ``n`` ages."""
    values = list(series)[:n]
    return values + [0.0] * (n - len(values))


def _style(fig: go.Figure, title: str, yaxis_title: str) -> go.Figure:
    fig.update_layout(
        title=title,
        template="plotly_white",
        height=380,
        margin=dict(l=10, r=10, t=40, b=10),
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
        xaxis_title="Age",
        yaxis_title=yaxis_title,
    )
    return fig


# ---------- Percentile fan ----------
def band_chart(ages: Sequence[int],
               bands: PercentileBands,
               title: str = "Percentile Fan",
               yaxis_title: str = "EUR (nominal)") -> go.Figure:
    """Shaded 10–90 and 20–80 bands around the median path."""
    x = list(ages)
    fig = go.Figure()

    for upper, lower, fill, label in _FANS:
        # invisible upper edge, then the lower edge filled up to it
        fig.add_trace(go.Scatter(x=x, y=_fit(getattr(bands, upper), len(x)), mode="lines",
                                 line=dict(width=0), hoverinfo="skip", showlegend=False))
        fig.add_trace(go.Scatter(x=x, y=_fit(getattr(bands, lower), len(x)), mode="lines",
                                 line=dict(width=0), fill="tonexty", fillcolor=fill,
                                 name=label, hovertemplate=_HOVER))

    fig.add_trace(go.Scatter(x=x, y=_fit(bands.p50, len(x)), mode="lines", name="Median",
                             line=dict(color=_MEDIAN_COLOR, width=2), hovertemplate=_HOVER))
    return _style(fig, title, yaxis_title)


def assets_chart(result: SimulationResult) -> go.Figure:
    fig = band_chart(result.ages, result.asset_percentiles, title="Assets (Percentile Fan)")
    retire_age = max(result.params.retirement_age, result.params.current_age)
    if result.ages and retire_age <= result.ages[-1]:
        fig.add_vline(x=retire_age, line_dash="dot", line_color="#4B5E58",
                      annotation_text="Retirement", annotation_position="top left")
    return fig


def spending_chart(result: SimulationResult) -> go.Figure:
    return band_chart(result.ages, result.spending_percentiles,
                      title="Monthly Spending (Percentile Fan)",
                      yaxis_title="EUR per month (nominal)")


# ---------- Success gauge ----------
def success_gauge(success_rate: float) -> go.Figure:
    """Radial gauge; ``success_rate`` is already a percentage."""
    pct = min(100.0, max(0.0, float(success_rate)))
    steps = [{"range": [low, high], "color": color} for low, high, color in _GAUGE_STEPS]
    fig = go.Figure(go.Indicator(
        mode="gauge+number",
        value=round(pct, 1),
        number={"suffix": "%"},
        gauge={"axis": {"range": [0, 100]}, "bar": {"thickness": 0.35}, "steps": steps},
    ))
    fig.update_layout(template="plotly_white", height=220, margin=dict(l=10, r=10, t=10, b=10))
    return fig


__all__ = ["band_chart", "assets_chart", "spending_chart", "success_gauge"]
