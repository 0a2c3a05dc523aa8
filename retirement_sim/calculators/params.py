"""Simulation inputs and their validation.

A :class:`SimulationParams` instance is the only thing the Monte Carlo engine
reads.  It is immutable for the duration of a run and shared read-only by every
trial.  Surrounding layers (forms, saved JSON plans) usually hold a plain plan
dictionary; :meth:`SimulationParams.from_dict` converts one, including plans
saved before expenses became a free-form list.

Example
-------

>>> params = SimulationParams.from_dict({"current_age": 60, "retirement_age": 60,
...                                      "legal_pension_age": 67, "horizon_age": 90})
>>> params.years
31
"""

from __future__ import annotations

import math
import numbers
from dataclasses import asdict, dataclass, replace
from typing import Dict, List, Optional, Tuple

MONTHLY = "monthly"
ANNUAL = "annual"
EXPENSE_INTERVALS = (MONTHLY, ANNUAL)

# Trials x years floats are held in memory at once for the percentile pass.
MAX_SIMULATION_RUNS = 10_000

_LEGACY_MONTHLY_LABELS = {
    "health": "Health Insurance",
    "food": "Groceries",
    "entertainment": "Entertainment",
    "shopping": "Shopping",
    "utilities": "Utilities",
}
_LEGACY_ANNUAL_LABELS = {
    "vacations": "Vacations",
    "repairs": "Home Repairs",
    "carMaintenance": "Car Maintenance",
}


class InvalidParamsError(ValueError):
    """Raised when a parameter set cannot be simulated.

    ``problems`` lists every violated rule, not just the first one.
    """

    def __init__(self, problems: List[str]):
        self.problems = list(problems)
        super().__init__("invalid simulation parameters: " + "; ".join(self.problems))


@dataclass(frozen=True)
class Expense:
    name: str
    amount: float
    interval: str = MONTHLY


@dataclass(frozen=True)
class OneTimeIncome:
    age: int
    amount: float


@dataclass(frozen=True)
class SimulationParams:
    """Household and market assumptions for one Monte Carlo run.

    Rates (``average_roi``, ``roi_volatility``, ``average_inflation``,
    ``inflation_volatility``) are decimals, e.g. ``0.07``.  The capital gains
    tax is a percentage, e.g. ``26.25``, as entered by the user.
    """

    current_age: int
    retirement_age: int
    legal_pension_age: int
    horizon_age: int
    current_assets: float = 0.0
    annual_savings: float = 0.0
    monthly_pension: float = 0.0
    expenses: Tuple[Expense, ...] = ()
    one_time_incomes: Tuple[OneTimeIncome, ...] = ()
    average_roi: float = 0.07
    roi_volatility: float = 0.15
    average_inflation: float = 0.025
    inflation_volatility: float = 0.01
    capital_gains_tax: float = 26.25
    simulation_runs: int = 500

    @property
    def years(self) -> int:
        return self.horizon_age - self.current_age + 1

    @property
    def ages(self) -> List[int]:
        return list(range(self.current_age, self.horizon_age + 1))

    @property
    def tax_rate(self) -> float:
        """Capital gains tax as a decimal."""
        return self.capital_gains_tax / 100.0

    @property
    def monthly_expense_total(self) -> float:
        return combined_expenses(self.expenses)["total_monthly"]

    @property
    def annual_expense_total(self) -> float:
        return combined_expenses(self.expenses)["total_annual"]

    def income_by_age(self) -> Dict[int, float]:
        """Sum one-time incomes per age inside the projection window."""
        by_age: Dict[int, float] = {}
        for income in self.one_time_incomes:
            if self.current_age <= income.age <= self.horizon_age:
                by_age[income.age] = by_age.get(income.age, 0.0) + income.amount
        return by_age

    def with_updates(self, **changes) -> "SimulationParams":
        return replace(self, **changes)

    @classmethod
    def from_dict(cls, plan: Dict) -> "SimulationParams":
        """Build params from a plan dictionary.

        Missing keys fall back to :data:`DEFAULT_PARAMS`.  Legacy
        ``monthly_expenses`` / ``annual_expenses`` mappings are migrated into
        the expense list when ``expenses`` is absent.  Numbers may be given as
        numeric strings; ages and ``simulation_runs`` must be whole numbers.

        Raises
        ------
        InvalidParamsError
            Naming every field that could not be read as a number.
        """
        base = DEFAULT_PARAMS
        problems: List[str] = []

        fields = {}
        for name in _WHOLE_FIELDS:
            fields[name] = _whole(plan.get(name, getattr(base, name)), name, problems)
        for name in _NUMBER_FIELDS:
            fields[name] = _number(plan.get(name, getattr(base, name)), name, problems)

        if "expenses" in plan:
            expenses = tuple(_expense_from_dict(e, problems) for e in plan.get("expenses") or [])
        elif "monthly_expenses" in plan or "annual_expenses" in plan:
            expenses = _migrate_legacy_expenses(plan, problems)
        else:
            expenses = base.expenses

        if problems:
            raise InvalidParamsError(problems)

        return cls(
            expenses=expenses,
            one_time_incomes=_sanitize_incomes(plan.get("one_time_incomes", [])),
            **fields,
        )

    def to_dict(self) -> Dict:
        data = asdict(self)
        data["expenses"] = [asdict(e) for e in self.expenses]
        data["one_time_incomes"] = [asdict(i) for i in self.one_time_incomes]
        return data


_WHOLE_FIELDS = ("current_age", "retirement_age", "legal_pension_age", "horizon_age", "simulation_runs")
_NUMBER_FIELDS = (
    "current_assets",
    "annual_savings",
    "monthly_pension",
    "average_roi",
    "roi_volatility",
    "average_inflation",
    "inflation_volatility",
    "capital_gains_tax",
)


def _number(value, name: str, problems: List[str]) -> Optional[float]:
    """Read a number or numeric string; record a problem otherwise."""
    if isinstance(value, bool):
        problems.append(f"{name} must be a number, got {value!r}")
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        problems.append(f"{name} must be a number, got {value!r}")
        return None


def _whole(value, name: str, problems: List[str]) -> Optional[int]:
    number = _number(value, name, problems)
    if number is None:
        return None
    if not math.isfinite(number) or number != int(number):
        problems.append(f"{name} must be a whole number, got {value!r}")
        return None
    return int(number)


def _expense_from_dict(item, problems: List[str]) -> Optional[Expense]:
    if isinstance(item, Expense):
        return item
    if not isinstance(item, dict):
        problems.append(f"expense entry must be a mapping, got {item!r}")
        return None
    name = str(item.get("name", ""))
    return Expense(
        name=name,
        amount=_number(item.get("amount", 0.0), f"expense '{name}' amount", problems),
        interval=str(item.get("interval", MONTHLY)),
    )


def _migrate_legacy_expenses(plan: Dict, problems: List[str]) -> Tuple[Expense, ...]:
    """Convert category -> amount mappings; zero and negative entries are dropped."""
    migrated: List[Expense] = []
    for key, labels, interval in (
        ("monthly_expenses", _LEGACY_MONTHLY_LABELS, MONTHLY),
        ("annual_expenses", _LEGACY_ANNUAL_LABELS, ANNUAL),
    ):
        mapping = plan.get(key) or {}
        for name, value in mapping.items():
            amount = _number(value, f"{key} '{name}'", problems)
            if amount is not None and amount > 0:
                migrated.append(Expense(labels.get(name, name), amount, interval))
    return tuple(migrated)


def _sanitize_incomes(raw) -> Tuple[OneTimeIncome, ...]:
    incomes: List[OneTimeIncome] = []
    if not isinstance(raw, (list, tuple)):
        return ()
    for entry in raw:
        if isinstance(entry, OneTimeIncome):
            incomes.append(entry)
            continue
        if not isinstance(entry, dict):
            continue
        try:
            age = float(entry.get("age"))
            amount = float(entry.get("amount"))
        except (TypeError, ValueError):
            continue
        if not (math.isfinite(age) and math.isfinite(amount)):
            continue
        incomes.append(OneTimeIncome(int(age), max(0.0, amount)))
    return tuple(incomes)


def combined_expenses(expenses) -> Dict[str, float]:
    """Fold expense categories into monthly/annual totals.

    Returns
    -------
    dict
        ``total_monthly`` and ``total_annual`` are the raw sums per interval;
        ``combined_monthly`` spreads annual items over twelve months and
        ``combined_annual`` is the full yearly spend.
    """
    total_monthly = sum(e.amount for e in expenses if e.interval == MONTHLY)
    total_annual = sum(e.amount for e in expenses if e.interval == ANNUAL)
    return {
        "total_monthly": total_monthly,
        "total_annual": total_annual,
        "combined_monthly": total_monthly + total_annual / 12.0,
        "combined_annual": total_monthly * 12.0 + total_annual,
    }


def _is_amount(value) -> bool:
    return (not isinstance(value, bool) and isinstance(value, numbers.Real)
            and math.isfinite(value) and value >= 0)


def validate_params(params: SimulationParams, max_runs: Optional[int] = MAX_SIMULATION_RUNS) -> SimulationParams:
    """Check every invariant the engine relies on.

    Raises
    ------
    InvalidParamsError
        Listing all violations found.  Nothing is simulated when this raises.
    """
    problems: List[str] = []

    # ages and run count feed range() and array shapes
    for name in _WHOLE_FIELDS:
        value = getattr(params, name)
        if isinstance(value, bool) or not isinstance(value, numbers.Integral):
            problems.append(f"{name} must be a whole number")
    if problems:
        raise InvalidParamsError(problems)

    if not params.current_age <= params.retirement_age:
        problems.append("current_age must not exceed retirement_age")
    if not params.retirement_age <= params.legal_pension_age:
        problems.append("retirement_age must not exceed legal_pension_age")
    if not params.retirement_age <= params.horizon_age:
        problems.append("retirement_age must not exceed horizon_age")
    if params.current_age < 0:
        problems.append("current_age must be non-negative")

    non_negative = {
        "current_assets": params.current_assets,
        "annual_savings": params.annual_savings,
        "monthly_pension": params.monthly_pension,
        "average_roi": params.average_roi,
        "roi_volatility": params.roi_volatility,
        "average_inflation": params.average_inflation,
        "inflation_volatility": params.inflation_volatility,
        "capital_gains_tax": params.capital_gains_tax,
    }
    for name, value in non_negative.items():
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            problems.append(f"{name} must be a number")
        elif not math.isfinite(value):
            problems.append(f"{name} must be a finite number")
        elif value < 0:
            problems.append(f"{name} must be non-negative")

    tax = params.capital_gains_tax
    if isinstance(tax, numbers.Real) and math.isfinite(tax) and params.tax_rate > 1.0:
        problems.append("capital_gains_tax must not exceed 100 percent")

    for expense in params.expenses:
        if expense.interval not in EXPENSE_INTERVALS:
            problems.append(f"expense '{expense.name}' has unknown interval '{expense.interval}'")
        if not _is_amount(expense.amount):
            problems.append(f"expense '{expense.name}' must be a non-negative amount")

    for income in params.one_time_incomes:
        if not _is_amount(income.amount):
            problems.append(f"one-time income at age {income.age} must be a non-negative amount")

    if params.simulation_runs < 1:
        problems.append("simulation_runs must be at least 1")
    elif max_runs is not None and params.simulation_runs > max_runs:
        problems.append(f"simulation_runs must not exceed {max_runs}")

    if problems:
        raise InvalidParamsError(problems)
    return params


DEFAULT_PARAMS = SimulationParams(
    current_age=55,
    retirement_age=60,
    legal_pension_age=67,
    horizon_age=90,
    current_assets=630000.0,
    annual_savings=48000.0,
    monthly_pension=5000.0,
    expenses=(
        Expense("Health Insurance", 1300.0, MONTHLY),
        Expense("Groceries", 1200.0, MONTHLY),
        Expense("Entertainment", 300.0, MONTHLY),
        Expense("Shopping", 500.0, MONTHLY),
        Expense("Utilities", 400.0, MONTHLY),
        Expense("Vacations", 12000.0, ANNUAL),
        Expense("Home Repairs", 5000.0, ANNUAL),
        Expense("Car Maintenance", 1500.0, ANNUAL),
    ),
    average_roi=0.07,
    roi_volatility=0.15,
    average_inflation=0.025,
    inflation_volatility=0.01,
    capital_gains_tax=26.25,
    simulation_runs=500,
)


__all__ = [
    "MONTHLY",
    "ANNUAL",
    "MAX_SIMULATION_RUNS",
    "InvalidParamsError",
    "Expense",
    "OneTimeIncome",
    "SimulationParams",
    "combined_expenses",
    "validate_params",
    "DEFAULT_PARAMS",
]
