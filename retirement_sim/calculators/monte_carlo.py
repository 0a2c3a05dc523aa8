"""Monte Carlo projection of household assets and retirement spending.

Each trial walks the household from ``current_age`` to ``horizon_age``:

* working years (``age < retirement_age``) compound the pool with a sampled
  return factor and add the year's savings as cost basis;
* retirement years grow the pool, then sell enough of it, grossed up for
  capital gains tax, to cover expenses not met by the pension.  A pension
  surplus is reinvested as basis.

Expenses start in today's money and are inflated every year by a sampled
inflation factor.  A trial is *exhausted* the first time a withdrawal exceeds
the pool; the flag never clears and the pool is floored at zero from then on.

The orchestrator gives every trial its own ``numpy.random.Generator`` spawned
from one :class:`numpy.random.SeedSequence`, so a seed reproduces a whole run
and trials never share random state.

Example
-------

>>> from retirement_sim.calculators.params import DEFAULT_PARAMS
>>> result = run_monte_carlo_simulation(DEFAULT_PARAMS.with_updates(simulation_runs=50), seed=7)
>>> len(result.ages) == DEFAULT_PARAMS.years
True
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Union

import numpy as np

from .params import InvalidParamsError, SimulationParams, validate_params
from .percentiles import calculate_percentiles
from .results import SimulationResult
from .sampling import sample_factor
from .withdrawal import apply_withdrawal

logger = logging.getLogger(__name__)


@dataclass
class Trajectory:
    """One trial's per-age series.

    ``assets`` is floored at zero for reporting; ``spending`` is the
    monthly-equivalent spend (zero during working years).
    """

    ages: List[int] = field(default_factory=list)
    assets: List[float] = field(default_factory=list)
    spending: List[float] = field(default_factory=list)
    exhausted: bool = False
    exhausted_at: Optional[int] = None


def simulate_path(params: SimulationParams, rng: np.random.Generator) -> Trajectory:
    """Project a single trial.  ``params`` is assumed to be validated."""
    assets = float(params.current_assets)
    cost_basis = float(params.current_assets)
    monthly_expense = params.monthly_expense_total
    annual_expense = params.annual_expense_total
    annual_pension = params.monthly_pension * 12.0
    tax_rate = params.tax_rate
    windfalls = params.income_by_age()
    retire_age = max(params.retirement_age, params.current_age)

    path = Trajectory()

    for age in params.ages:
        roi_factor = sample_factor(params.average_roi, params.roi_volatility, rng)
        assets *= roi_factor

        windfall = windfalls.get(age, 0.0)
        if windfall:
            assets += windfall
            cost_basis += windfall

        if age < retire_age:
            # --- accumulation: contributions are basis, nothing is spent ---
            assets += params.annual_savings
            cost_basis += params.annual_savings
            spending = 0.0
        else:
            # --- decumulation ---
            expense_need = monthly_expense * 12.0 + annual_expense
            income = annual_pension if age >= params.legal_pension_age else 0.0
            net_needed = expense_need - income

            if net_needed > 0:
                sale = apply_withdrawal(assets, cost_basis, net_needed, tax_rate)
                assets, cost_basis = sale.assets, sale.cost_basis
                if sale.exhausted and not path.exhausted:
                    path.exhausted = True
                    path.exhausted_at = age
            else:
                surplus = -net_needed
                assets += surplus
                cost_basis += surplus

            spending = monthly_expense + annual_expense / 12.0

        inflation_factor = sample_factor(params.average_inflation, params.inflation_volatility, rng)
        monthly_expense *= inflation_factor
        annual_expense *= inflation_factor

        assets = max(0.0, assets)
        cost_basis = min(max(0.0, cost_basis), assets)

        path.ages.append(age)
        path.assets.append(assets)
        path.spending.append(spending)

    return path


def trial_generators(n_trials: int, seed: Optional[int] = None) -> Iterator[np.random.Generator]:
    """Yield one independent generator per trial."""
    for child in np.random.SeedSequence(seed).spawn(n_trials):
        yield np.random.default_rng(child)


def run_monte_carlo_simulation(
    params: Union[SimulationParams, dict],
    seed: Optional[int] = None,
) -> SimulationResult:
    """Run ``params.simulation_runs`` trials and aggregate them.

    Parameters
    ----------
    params : SimulationParams or dict
        Plan to simulate.  Dictionaries go through
        :meth:`SimulationParams.from_dict`.
    seed : int, optional
        Root seed.  The same seed and params give an identical result.

    Returns
    -------
    SimulationResult
        Asset and spending percentile bands per age plus the success rate
        (percent of trials never exhausted).

    Raises
    ------
    InvalidParamsError
        Before any trial runs, if the parameters violate an invariant.
    """
    try:
        if isinstance(params, dict):
            params = SimulationParams.from_dict(params)
        validate_params(params)
    except InvalidParamsError as exc:
        logger.warning("Rejected simulation parameters: %s", "; ".join(exc.problems))
        raise

    n_runs = params.simulation_runs
    ages = params.ages
    logger.debug("Running %d trials over ages %d-%d (seed=%s)", n_runs, ages[0], ages[-1], seed)

    asset_runs = np.empty((n_runs, len(ages)))
    spending_runs = np.empty((n_runs, len(ages)))
    successes = 0

    for i, rng in enumerate(trial_generators(n_runs, seed)):
        path = simulate_path(params, rng)
        asset_runs[i] = path.assets
        spending_runs[i] = path.spending
        if not path.exhausted:
            successes += 1

    success_rate = 100.0 * successes / n_runs
    logger.info("Monte Carlo run finished: %d/%d trials succeeded (%.1f%%)", successes, n_runs, success_rate)

    return SimulationResult(
        ages=ages,
        asset_percentiles=calculate_percentiles(asset_runs),
        spending_percentiles=calculate_percentiles(spending_runs),
        success_rate=success_rate,
        params=params,
        success_count=successes,
        trials=n_runs,
    )


__all__ = ["Trajectory", "simulate_path", "trial_generators", "run_monte_carlo_simulation"]
