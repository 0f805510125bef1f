"""
Salary <-> hourly conversion and take-home pay for the salary calculator.

Gross figures are derived from the work pattern; income tax is always
computed on the annual figure and then spread back over the same periods.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

import config as cfg
import tax
from config import Region


# ─── Data Classes ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class WorkPattern:
    """How the year is split into weeks, days and hours."""

    hours_per_week: float = cfg.DEFAULT_HOURS_PER_WEEK
    weeks_per_year: float = cfg.DEFAULT_WEEKS_PER_YEAR
    days_per_week: float = cfg.DEFAULT_DAYS_PER_WEEK

    def __post_init__(self) -> None:
        if not self.hours_per_week > 0:
            raise ValueError("Hours per week must be greater than 0")
        if not self.weeks_per_year > 0:
            raise ValueError("Weeks per year must be greater than 0")
        if not self.days_per_week > 0:
            raise ValueError("Days per week must be greater than 0")


@dataclass(frozen=True)
class PayBreakdown:
    """Gross and net pay per period plus the income tax behind them."""

    region: Region
    pattern: WorkPattern
    annual: float
    weekly: float
    daily: float
    hourly: float
    tax: tax.TaxResult
    net_annual: float
    net_weekly: float
    net_daily: float
    net_hourly: float
    effective_rate: float      # percent of gross annual pay
    marginal_rate: float       # percent, income tax only


# ─── Conversions ─────────────────────────────────────────────────────

def _breakdown(
    annual: float,
    weekly: float,
    daily: float,
    hourly: float,
    pattern: WorkPattern,
    region: Region,
) -> PayBreakdown:
    result = tax.compute_tax(annual, region)
    net_annual = annual - result.total_tax
    net_weekly = net_annual / pattern.weeks_per_year
    effective = result.total_tax / annual * 100 if annual > 0 else 0.0

    return PayBreakdown(
        region=region,
        pattern=pattern,
        annual=annual,
        weekly=weekly,
        daily=daily,
        hourly=hourly,
        tax=result,
        net_annual=net_annual,
        net_weekly=net_weekly,
        net_daily=net_weekly / pattern.days_per_week,
        net_hourly=net_weekly / pattern.hours_per_week,
        effective_rate=effective,
        marginal_rate=tax.marginal_rate(annual, region),
    )


def from_salary(
    salary: float,
    pattern: WorkPattern = WorkPattern(),
    region: Union[Region, str, None] = cfg.DEFAULT_REGION,
) -> PayBreakdown:
    """Break an annual salary down into weekly, daily and hourly pay.

    Raises
    ------
    ValueError
        If *salary* is negative or not finite.
    """
    salary = float(salary)
    if salary < 0:
        raise ValueError("Salary must not be negative")
    weekly = salary / pattern.weeks_per_year
    return _breakdown(
        annual=salary,
        weekly=weekly,
        daily=weekly / pattern.days_per_week,
        hourly=weekly / pattern.hours_per_week,
        pattern=pattern,
        region=tax.resolve_region(region),
    )


def from_hourly(
    hourly: float,
    pattern: WorkPattern = WorkPattern(),
    region: Union[Region, str, None] = cfg.DEFAULT_REGION,
) -> PayBreakdown:
    """Build an annual salary up from an hourly rate.

    Raises
    ------
    ValueError
        If *hourly* is negative or not finite.
    """
    hourly = float(hourly)
    if hourly < 0:
        raise ValueError("Hourly rate must not be negative")
    weekly = hourly * pattern.hours_per_week
    return _breakdown(
        annual=weekly * pattern.weeks_per_year,
        weekly=weekly,
        daily=weekly / pattern.days_per_week,
        hourly=hourly,
        pattern=pattern,
        region=tax.resolve_region(region),
    )
