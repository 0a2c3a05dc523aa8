"""Gross-up of withdrawals from a taxable asset pool.

Selling part of the pool realizes gains on the fraction that is not cost
basis.  To end up with ``net_needed`` after a flat capital gains tax ``t`` the
household must sell::

    W = net_needed / (1 - t * (1 - basis_ratio))

where ``basis_ratio = cost_basis / current_assets`` clamped to ``[0, 1]``.

Example
-------

>>> round(gross_withdrawal(1100, 1000, 100, 0.25), 2)
102.33
"""

from __future__ import annotations

from typing import NamedTuple


class Withdrawal(NamedTuple):
    gross: float
    assets: float
    cost_basis: float
    exhausted: bool


def basis_ratio(current_assets: float, cost_basis: float) -> float:
    """Share of the pool that is principal, clamped to [0, 1].

    An empty or negative pool counts as all basis so nothing is grossed up.
    """
    if current_assets <= 0:
        return 1.0
    return min(1.0, max(0.0, cost_basis / current_assets))


def gross_withdrawal(current_assets: float, cost_basis: float, net_needed: float, tax_rate: float) -> float:
    """Gross amount to sell so that ``net_needed`` remains after tax.

    Parameters
    ----------
    current_assets : float
        Pool value at the time of the sale (after this year's growth).
    cost_basis : float
        Remaining principal in the pool.
    net_needed : float
        Cash required after tax.  Non-positive needs return ``0.0``.
    tax_rate : float
        Flat capital gains rate as a decimal in ``[0, 1]``.

    Returns
    -------
    float
        ``W >= net_needed``.  Returns ``inf`` when the whole sale would be
        taxed away (``tax_rate == 1`` on a pool with no basis).
    """
    if not 0.0 <= tax_rate <= 1.0:
        raise ValueError("tax_rate must be between 0 and 1")
    if net_needed <= 0:
        return 0.0
    ratio = basis_ratio(current_assets, cost_basis)
    denom = 1.0 - tax_rate * (1.0 - ratio)
    if denom <= 0.0:
        return float("inf")
    return net_needed / denom


def apply_withdrawal(current_assets: float, cost_basis: float, net_needed: float, tax_rate: float) -> Withdrawal:
    """Sell enough of the pool to cover ``net_needed`` and update the basis.

    The basis shrinks by the proportional share consumed and is clamped to
    ``[0, remaining assets]``.  When the sale exceeds the pool the result is
    flagged ``exhausted`` and both assets and basis are floored at zero.
    """
    gross = gross_withdrawal(current_assets, cost_basis, net_needed, tax_rate)
    remaining = current_assets - gross
    if remaining < 0:
        return Withdrawal(gross, 0.0, 0.0, True)
    basis = cost_basis - basis_ratio(current_assets, cost_basis) * gross
    basis = min(max(0.0, basis), remaining)
    return Withdrawal(gross, remaining, basis, False)


__all__ = ["Withdrawal", "basis_ratio", "gross_withdrawal", "apply_withdrawal"]
