"""Monte Carlo retirement projections.

Typical use::

    from retirement_sim import DEFAULT_PARAMS, run_monte_carlo_simulation

    result = run_monte_carlo_simulation(DEFAULT_PARAMS, seed=42)
    print(f"{result.success_rate:.1f}% of trials stayed funded")
"""

from .calculators.monte_carlo import run_monte_carlo_simulation, simulate_path
from .calculators.params import (
    DEFAULT_PARAMS,
    Expense,
    InvalidParamsError,
    OneTimeIncome,
    SimulationParams,
)
from .calculators.results import SimulationResult
from .calculators.sampling import sample_factor
from .calculators.withdrawal import gross_withdrawal

__version__ = "1.0.0"

__all__ = [
    "run_monte_carlo_simulation",
    "simulate_path",
    "DEFAULT_PARAMS",
    "Expense",
    "InvalidParamsError",
    "OneTimeIncome",
    "SimulationParams",
    "SimulationResult",
    "sample_factor",
    "gross_withdrawal",
]
