"""Numerical core of the retirement simulator.

The `calculators` package contains small, focused modules that each implement
one piece of the Monte Carlo engine:

* ``params`` – simulation inputs, expense folding and fail-fast validation.
* ``sampling`` – lognormal return/inflation factors drawn via Box-Muller.
* ``withdrawal`` – tax gross-up of withdrawals and cost-basis bookkeeping.
* ``percentiles`` – p10/p20/p50/p80/p90 bands across trials.
* ``results`` – the immutable result bundle handed to reporting layers.
* ``monte_carlo`` – single-trial projection and the multi-trial orchestrator.

Each module exposes a few public functions with clear parameters and returns.  See
individual docstrings for details.
"""

from . import params, sampling, withdrawal, percentiles, results, monte_carlo  # noqa: F401

__all__ = ["params", "sampling", "withdrawal", "percentiles", "results", "monte_carlo"]
