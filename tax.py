"""
UK income tax calculation functions for the salary calculator.

The scalar functions (``taper_allowance``, ``build_bands``, ``allocate``,
``compute_tax``) give the exact band-by-band figures shown to the user.
``personal_allowance``, ``income_tax`` and ``marginal_rate`` accept numpy
arrays so whole income curves can be evaluated at once for the charts.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple, Union

import numpy as np

import config as cfg
from config import Extent, Region


# ─── Data Classes ────────────────────────────────────────────────────

@dataclass(frozen=True)
class BandThreshold:
    """A band resolved to an absolute gross-income upper bound."""

    name: str
    rate: float
    upper: float      # gross income where the band ends (inf for the last)


@dataclass(frozen=True)
class BandAmount:
    """Income and tax falling in one band."""

    name: str
    rate: float
    amount: float
    tax: float


@dataclass(frozen=True)
class TaxResult:
    personal_allowance: float
    taxable_income: float
    total_tax: float
    breakdown: Tuple[BandAmount, ...]

    def to_dict(self) -> dict:
        return {
            "personal_allowance": self.personal_allowance,
            "taxable_income": self.taxable_income,
            "total_tax": self.total_tax,
            "breakdown": [
                {"name": b.name, "rate": b.rate, "amount": b.amount, "tax": b.tax}
                for b in self.breakdown
            ],
        }


# ─── Helpers ─────────────────────────────────────────────────────────

def _check_income(gross_income: float) -> float:
    """Return *gross_income* as a float, rejecting negative or non-finite values."""
    value = float(gross_income)
    if math.isnan(value) or math.isinf(value):
        raise ValueError(f"Gross income must be a finite number, got {gross_income!r}")
    if value < 0:
        raise ValueError(f"Gross income must not be negative, got {gross_income!r}")
    return value


def resolve_region(region: Union[Region, str, None]) -> Region:
    """Map a region identifier to a ``Region``.

    Unrecognised identifiers fall back to England/Wales/NI.
    """
    if isinstance(region, Region):
        return region
    if region is None:
        return cfg.DEFAULT_REGION
    return cfg.REGION_ALIASES.get(str(region).strip().lower(), cfg.DEFAULT_REGION)


def rate_template(region: Union[Region, str, None]):
    """Rate template ``(name, rate, width)`` rows for *region*."""
    return cfg.RATE_TEMPLATES[resolve_region(region)]


# ─── Personal Allowance ─────────────────────────────────────────────

def taper_allowance(gross_income: float) -> float:
    """Compute personal allowance after the £100k taper.

    For every £2 of income above £100,000 the allowance drops by £1,
    reaching zero at £125,140.

    Raises
    ------
    ValueError
        If *gross_income* is negative, NaN or infinite.
    """
    gross_income = _check_income(gross_income)
    if gross_income <= cfg.PA_TAPER_THRESHOLD:
        return float(cfg.PERSONAL_ALLOWANCE)
    reduction = (gross_income - cfg.PA_TAPER_THRESHOLD) / 2
    return max(0.0, cfg.PERSONAL_ALLOWANCE - reduction)


def personal_allowance(gross_income: np.ndarray) -> np.ndarray:
    """Vectorised ``taper_allowance`` (no input validation)."""
    gross_income = np.asarray(gross_income, dtype=float)
    excess = np.maximum(gross_income - cfg.PA_TAPER_THRESHOLD, 0.0)
    return np.maximum(cfg.PERSONAL_ALLOWANCE - excess / 2, 0.0)


def taxable_income(gross_income: float, allowance: float) -> float:
    """Gross income minus personal allowance, floored at 0."""
    return max(0.0, gross_income - allowance)


# ─── Band Table ──────────────────────────────────────────────────────

def build_bands(
    allowance: float,
    region: Union[Region, str, None] = cfg.DEFAULT_REGION,
) -> Tuple[BandThreshold, ...]:
    """Expand the region's rate template into absolute gross thresholds.

    Fixed-width bands stack on top of the allowance, so their limits
    move down as the allowance tapers. ``Extent.TOP_RATE`` bands always
    end at ``TOP_RATE_THRESHOLD``; ``Extent.UNBOUNDED`` bands never end.
    """
    bands = []
    cumulative = 0.0
    for name, rate, width in rate_template(region):
        if width is Extent.TOP_RATE:
            upper = float(cfg.TOP_RATE_THRESHOLD)
        elif width is Extent.UNBOUNDED:
            upper = math.inf
        else:
            cumulative += width
            upper = allowance + cumulative
        bands.append(BandThreshold(name, rate, upper))
    return tuple(bands)


# ─── Income Tax ──────────────────────────────────────────────────────

def allocate(
    gross_income: float,
    bands: Sequence[BandThreshold],
    allowance: float,
) -> TaxResult:
    """Spread *gross_income* over *bands* and sum the tax.

    Every band appears in the breakdown, including those with nothing
    in them.
    """
    breakdown = []
    total_tax = 0.0
    previous = allowance
    for band in bands:
        amount = max(0.0, min(gross_income, band.upper) - previous)
        tax = amount * band.rate
        breakdown.append(BandAmount(band.name, band.rate, amount, tax))
        total_tax += tax
        previous = band.upper

    return TaxResult(
        personal_allowance=allowance,
        taxable_income=taxable_income(gross_income, allowance),
        total_tax=total_tax,
        breakdown=tuple(breakdown),
    )


def compute_tax(
    gross_income: float,
    region: Union[Region, str, None] = cfg.DEFAULT_REGION,
) -> TaxResult:
    """Income tax for one gross annual income.

    Parameters
    ----------
    gross_income : float
        Annual gross income, finite and non-negative.
    region : Region or str
        ``'england'`` (default) or ``'scotland'``. Anything else is
        treated as England/Wales/NI.

    Returns
    -------
    TaxResult
        Allowance, taxable income, total tax and per-band breakdown.
    """
    gross_income = _check_income(gross_income)
    allowance = taper_allowance(gross_income)
    bands = build_bands(allowance, region)
    return allocate(gross_income, bands, allowance)


def income_tax(
    gross_income: np.ndarray,
    region: Union[Region, str, None] = cfg.DEFAULT_REGION,
) -> np.ndarray:
    """Calculate annual income tax for an array of incomes.

    Same band rules as ``compute_tax``, but each band limit is an array
    because the allowance differs per income.
    """
    gross_income = np.asarray(gross_income, dtype=float)
    pa = personal_allowance(gross_income)

    tax = np.zeros_like(gross_income)
    previous = pa
    cumulative = 0.0
    for _, rate, width in rate_template(region):
        if width is Extent.TOP_RATE:
            upper = np.full_like(gross_income, cfg.TOP_RATE_THRESHOLD)
        elif width is Extent.UNBOUNDED:
            upper = np.full_like(gross_income, np.inf)
        else:
            cumulative += width
            upper = pa + cumulative
        in_band = np.maximum(np.minimum(gross_income, upper) - previous, 0.0)
        tax += in_band * rate
        previous = upper

    return tax


def marginal_rate(
    salary: float,
    region: Union[Region, str, None] = cfg.DEFAULT_REGION,
) -> float:
    """Income tax marginal rate (percent) at *salary*, using a £1 delta."""
    s = np.array([salary, salary + 1.0])
    it = income_tax(s, region)
    return round(float(it[1] - it[0]) * 100, 2)


def effective_rates(
    incomes: Iterable[float],
    region: Union[Region, str, None] = cfg.DEFAULT_REGION,
) -> np.ndarray:
    """Total tax as a percentage of gross income (0 where income is 0)."""
    incomes = np.asarray(list(incomes), dtype=float)
    it = income_tax(incomes, region)
    safe = np.where(incomes > 0, incomes, 1.0)
    return np.where(incomes > 0, it / safe * 100, 0.0)


# ─── Self-check ──────────────────────────────────────────────────────

if __name__ == "__main__":
    tests_passed = 0
    tests_failed = 0

    def check(name: str, actual: float, expected: float, tol: float = 0.01) -> None:
        global tests_passed, tests_failed
        passed = abs(actual - expected) <= tol
        status = "PASS" if passed else "FAIL"
        if passed:
            tests_passed += 1
        else:
            tests_failed += 1
        print(f"  [{status}] {name}: expected {expected}, got {actual:.2f}")

    print("=== Personal Allowance ===")
    check("PA on £30k", taper_allowance(30_000), 12_570)
    check("PA on £110k", taper_allowance(110_000), 7_570)
    check("PA on £125,140", taper_allowance(125_140), 0)

    print("\n=== Income Tax ===")
    check("IT on £30k (England)", compute_tax(30_000).total_tax, 3_486.0)
    check("IT on £150k (England)", compute_tax(150_000).total_tax, 53_703.0)
    check("IT on £50k (Scotland)", compute_tax(50_000, "scotland").total_tax, 9_013.80)

    print("\n=== Marginal Rates ===")
    check("Marginal at £110k", marginal_rate(110_000), 60.0)

    print(f"\n{'='*50}")
    print(f"Results: {tests_passed} passed, {tests_failed} failed")
