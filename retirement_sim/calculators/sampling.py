"""Lognormal sampling of yearly growth factors.

Returns and inflation are applied multiplicatively (``assets *= factor``).  A
normally distributed rate can produce a factor of zero or below on a bad draw,
i.e. a loss of more than 100 %.  Instead the arithmetic mean ``m`` and standard
deviation ``s`` of the *rate* are moment-matched onto a lognormal factor
``X = 1 + r``::

    sigma**2 = ln(1 + s**2 / (1 + m)**2)
    mu       = ln(1 + m) - sigma**2 / 2

so that ``E[X] = 1 + m`` and ``SD[X] = s`` while ``X`` stays strictly positive.

Example
-------

>>> sample_factor(0.05, 0.0)
1.05
"""

from __future__ import annotations

import math
from typing import Optional, Tuple

import numpy as np


def sample_standard_normal(rng: np.random.Generator) -> float:
    """Draw one standard normal variate with the Box-Muller transform.

    Only the cosine branch is used; the paired sine value is discarded.
    """
    u = 0.0
    v = 0.0
    while u == 0.0:
        u = rng.random()
    while v == 0.0:
        v = rng.random()
    return math.sqrt(-2.0 * math.log(u)) * math.cos(2.0 * math.pi * v)


def lognormal_params_from_arithmetic(mean: float, stdev: float) -> Tuple[float, float]:
    """Return ``(mu, sigma)`` of ``ln(1 + r)`` for a rate with the given moments.

    Parameters
    ----------
    mean : float
        Arithmetic mean of the yearly rate, e.g. ``0.07``.  Must exceed -1.
    stdev : float
        Arithmetic standard deviation of the yearly rate.  Must be >= 0.
    """
    if mean <= -1.0:
        raise ValueError("mean rate must be greater than -1")
    if stdev < 0.0:
        raise ValueError("standard deviation must be non-negative")
    growth = 1.0 + mean
    sigma2 = math.log1p((stdev * stdev) / (growth * growth))
    sigma = math.sqrt(max(0.0, sigma2))
    mu = math.log(growth) - 0.5 * sigma2
    return mu, sigma


def sample_factor(mean: float, stdev: float, rng: Optional[np.random.Generator] = None) -> float:
    """Sample a strictly positive growth factor ``1 + r``.

    With ``stdev == 0`` the factor is exactly ``1 + mean`` and no random
    number is consumed.
    """
    if stdev == 0.0:
        if mean <= -1.0:
            raise ValueError("mean rate must be greater than -1")
        return 1.0 + mean
    mu, sigma = lognormal_params_from_arithmetic(mean, stdev)
    if rng is None:
        rng = np.random.default_rng()
    return math.exp(mu + sigma * sample_standard_normal(rng))


__all__ = ["sample_standard_normal", "lognormal_params_from_arithmetic", "sample_factor"]
