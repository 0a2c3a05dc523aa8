"""Tests for the lognormal return/inflation factor sampler."""

import math

import numpy as np
import pytest

from retirement_sim.calculators import sampling


@pytest.mark.parametrize("mean", [0.0, 0.025, 0.07, -0.5, 1.5])
def test_zero_volatility_is_deterministic(mean):
    rng = np.random.default_rng(0)
    for _ in range(5):
        assert sampling.sample_factor(mean, 0.0, rng) == 1.0 + mean


def test_zero_volatility_consumes_no_randomness():
    rng = np.random.default_rng(3)
    sampling.sample_factor(0.05, 0.0, rng)
    assert rng.random() == np.random.default_rng(3).random()


def test_factor_moments_match_arithmetic_inputs():
    """Mean and stdev of factor - 1 converge to the requested rate moments."""
    rng = np.random.default_rng(2024)
    mean, stdev = 0.07, 0.15
    rates = np.array([sampling.sample_factor(mean, stdev, rng) - 1.0 for _ in range(20000)])
    assert abs(rates.mean() - mean) < 0.02
    assert abs(rates.std() - stdev) < 0.02


@pytest.mark.parametrize("mean,stdev", [(0.025, 0.01), (0.07, 0.15), (-0.5, 0.9), (0.0, 2.0)])
def test_factors_are_strictly_positive(mean, stdev):
    rng = np.random.default_rng(11)
    draws = [sampling.sample_factor(mean, stdev, rng) for _ in range(10000)]
    assert min(draws) > 0.0


def test_standard_normal_box_muller():
    rng = np.random.default_rng(99)
    z = np.array([sampling.sample_standard_normal(rng) for _ in range(20000)])
    assert abs(z.mean()) < 0.03
    assert abs(z.std() - 1.0) < 0.03


def test_lognormal_params_without_volatility():
    mu, sigma = sampling.lognormal_params_from_arithmetic(0.07, 0.0)
    assert sigma == 0.0
    assert math.isclose(mu, math.log(1.07), rel_tol=1e-12)


def test_lognormal_params_identities():
    m, s = 0.07, 0.15
    mu, sigma = sampling.lognormal_params_from_arithmetic(m, s)
    # E[X] = exp(mu + sigma^2/2), Var[X] = (exp(sigma^2) - 1) * E[X]^2
    expected_mean = math.exp(mu + sigma ** 2 / 2)
    expected_sd = math.sqrt((math.exp(sigma ** 2) - 1.0)) * expected_mean
    assert math.isclose(expected_mean, 1.0 + m, rel_tol=1e-12)
    assert math.isclose(expected_sd, s, rel_tol=1e-12)


def test_same_seed_same_draws():
    a = sampling.sample_factor(0.07, 0.15, np.random.default_rng(5))
    b = sampling.sample_factor(0.07, 0.15, np.random.default_rng(5))
    assert a == b


def test_works_without_explicit_generator():
    assert sampling.sample_factor(0.07, 0.15) > 0.0


@pytest.mark.parametrize("mean,stdev", [(-1.0, 0.1), (-2.0, 0.0), (0.05, -0.1)])
def test_undefined_inputs_raise(mean, stdev):
    with pytest.raises(ValueError):
        sampling.sample_factor(mean, stdev, np.random.default_rng(0))
