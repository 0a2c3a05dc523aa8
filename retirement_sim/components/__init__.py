"""Expose component submodules for convenience."""

from .charts import band_chart, assets_chart, spending_chart, success_gauge
from .insights import generate_insights, generate_recommendations, plan_health_score

__all__ = [
    "band_chart",
    "assets_chart",
    "spending_chart",
    "success_gauge",
    "generate_insights",
    "generate_recommendations",
    "plan_health_score",
]
