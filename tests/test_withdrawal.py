"""Tests for the capital-gains gross-up of withdrawals."""

import math

import pytest

from retirement_sim.calculators import withdrawal


def test_gross_up_for_taxed_gains():
    gross = withdrawal.gross_withdrawal(1100, 1000, 100, 0.25)
    expected = 100 / (1 - 0.25 * (1 - 1000 / 1100))
    assert math.isclose(gross, expected, rel_tol=1e-12)
    assert gross == pytest.approx(102.3256, abs=1e-4)


@pytest.mark.parametrize("tax_rate", [0.0, 0.25, 0.5, 0.99, 1.0])
def test_pool_of_pure_basis_needs_no_gross_up(tax_rate):
    assert withdrawal.gross_withdrawal(5000.0, 5000.0, 321.5, tax_rate) == 321.5


def test_gross_never_below_net():
    for basis in (0.0, 250.0, 500.0, 1000.0):
        assert withdrawal.gross_withdrawal(1000.0, basis, 100.0, 0.3) >= 100.0


def test_empty_pool_treated_as_all_basis():
    assert withdrawal.gross_withdrawal(0.0, 0.0, 80.0, 0.25) == 80.0
    assert withdrawal.gross_withdrawal(-10.0, 0.0, 80.0, 0.25) == 80.0


def test_basis_ratio_is_clamped():
    assert withdrawal.basis_ratio(1000.0, 2000.0) == 1.0
    assert withdrawal.basis_ratio(1000.0, -5.0) == 0.0
    assert withdrawal.basis_ratio(0.0, 10.0) == 1.0


def test_no_need_no_withdrawal():
    assert withdrawal.gross_withdrawal(1000.0, 500.0, 0.0, 0.25) == 0.0
    assert withdrawal.gross_withdrawal(1000.0, 500.0, -50.0, 0.25) == 0.0


def test_fully_taxed_gain_pool_is_unaffordable():
    assert withdrawal.gross_withdrawal(1000.0, 0.0, 10.0, 1.0) == float("inf")


@pytest.mark.parametrize("tax_rate", [-0.01, 1.01, 26.25])
def test_tax_rate_outside_unit_interval_rejected(tax_rate):
    with pytest.raises(ValueError):
        withdrawal.gross_withdrawal(1000.0, 500.0, 100.0, tax_rate)


def test_apply_withdrawal_consumes_basis_proportionally():
    sale = withdrawal.apply_withdrawal(1100.0, 1000.0, 100.0, 0.25)
    gross = 100 / (1 - 0.25 * (1 - 1000 / 1100))
    assert sale.gross == pytest.approx(gross)
    assert sale.assets == pytest.approx(1100.0 - gross)
    assert sale.cost_basis == pytest.approx(1000.0 - (1000.0 / 1100.0) * gross)
    assert 0.0 <= sale.cost_basis <= sale.assets
    assert not sale.exhausted


def test_apply_withdrawal_flags_exhaustion_and_floors_state():
    sale = withdrawal.apply_withdrawal(50.0, 50.0, 100.0, 0.25)
    assert sale.exhausted
    assert sale.assets == 0.0
    assert sale.cost_basis == 0.0


def test_apply_withdrawal_unaffordable_sale_has_no_nan():
    sale = withdrawal.apply_withdrawal(100.0, 0.0, 10.0, 1.0)
    assert sale.exhausted
    assert sale.assets == 0.0
    assert not math.isnan(sale.cost_basis)


def test_apply_withdrawal_exact_depletion_is_not_exhaustion():
    sale = withdrawal.apply_withdrawal(100.0, 100.0, 100.0, 0.25)
    assert sale.assets == 0.0
    assert not sale.exhausted
