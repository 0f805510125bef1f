"""Unit tests for the tax module.

Figures use the 2025/26 England/Wales/NI and Scottish income tax bands.
"""

import math

import numpy as np
import pytest

import config as cfg
import tax
from config import Region


# ─── Personal allowance ──────────────────────────────────────────────

@pytest.mark.parametrize("gross", [0, 1, 12_570, 50_000, 99_999.99, 100_000])
def test_full_allowance_up_to_taper_threshold(gross):
    assert tax.taper_allowance(gross) == 12_570


def test_allowance_tapers_one_for_two():
    assert tax.taper_allowance(110_000) == 7_570
    assert tax.taper_allowance(100_001) == 12_569.5


def test_allowance_strictly_decreasing_in_taper_zone():
    incomes = np.linspace(100_000.5, 125_140, 500)
    allowances = [tax.taper_allowance(g) for g in incomes]
    assert all(b < a for a, b in zip(allowances, allowances[1:]))


@pytest.mark.parametrize("gross", [125_140, 125_141, 150_000, 1_000_000])
def test_allowance_zero_from_taper_end(gross):
    assert tax.taper_allowance(gross) == 0


def test_taper_end_matches_constants():
    assert cfg.PA_TAPER_END == cfg.PERSONAL_ALLOWANCE * 2 + cfg.PA_TAPER_THRESHOLD


@pytest.mark.parametrize("bad", [-1, -0.01, math.nan, math.inf])
def test_invalid_income_rejected(bad):
    with pytest.raises(ValueError):
        tax.taper_allowance(bad)
    with pytest.raises(ValueError):
        tax.compute_tax(bad)


def test_vectorised_allowance_matches_scalar():
    incomes = np.array([0, 50_000, 100_000, 110_000, 125_140, 200_000], dtype=float)
    expected = [tax.taper_allowance(g) for g in incomes]
    assert np.allclose(tax.personal_allowance(incomes), expected)


# ─── Regions ─────────────────────────────────────────────────────────

@pytest.mark.parametrize(
    "identifier, expected",
    [
        (Region.SCOTLAND, Region.SCOTLAND),
        ("scotland", Region.SCOTLAND),
        ("Scotland", Region.SCOTLAND),
        ("SCO_2025_26", Region.SCOTLAND),
        ("england", Region.ENGLAND),
        ("England/Wales/NI", Region.ENGLAND),
        ("ENG_2025_26", Region.ENGLAND),
        ("wales", Region.ENGLAND),
        ("", Region.ENGLAND),
        (None, Region.ENGLAND),
    ],
)
def test_resolve_region(identifier, expected):
    assert tax.resolve_region(identifier) is expected


def test_unknown_region_falls_back_to_england():
    assert tax.compute_tax(80_000, "atlantis") == tax.compute_tax(80_000, "england")


# ─── Band table ──────────────────────────────────────────────────────

def test_england_bands_full_allowance():
    bands = tax.build_bands(12_570, Region.ENGLAND)
    assert [b.name for b in bands] == ["Basic rate", "Higher rate", "Additional rate"]
    assert [b.upper for b in bands] == [50_270, 125_140, math.inf]


def test_england_bands_zero_allowance():
    bands = tax.build_bands(0, Region.ENGLAND)
    assert [b.upper for b in bands] == [37_700, 125_140, math.inf]


def test_scotland_bands_full_allowance():
    bands = tax.build_bands(12_570, Region.SCOTLAND)
    assert [b.upper for b in bands] == [15_397, 27_491, 43_662, 75_000, 125_140, math.inf]
    assert [b.rate for b in bands] == [0.19, 0.20, 0.21, 0.42, 0.45, 0.48]


@pytest.mark.parametrize("region", list(Region))
@pytest.mark.parametrize("allowance", [0, 1_000, 6_285, 12_570])
def test_band_bounds_non_decreasing(region, allowance):
    uppers = [b.upper for b in tax.build_bands(allowance, region)]
    assert uppers == sorted(uppers)
    assert uppers[-1] == math.inf


# ─── Allocation ──────────────────────────────────────────────────────

def test_scenario_england_30k():
    result = tax.compute_tax(30_000, "england")
    assert result.personal_allowance == 12_570
    assert result.taxable_income == 17_430
    assert result.total_tax == pytest.approx(3_486.00)
    amounts = [b.amount for b in result.breakdown]
    assert amounts == [17_430, 0, 0]


def test_scenario_england_150k():
    result = tax.compute_tax(150_000, "england")
    expected = 37_700 * 0.20 + (125_140 - 37_700) * 0.40 + (150_000 - 125_140) * 0.45
    assert result.personal_allowance == 0
    assert result.taxable_income == 150_000
    assert result.total_tax == pytest.approx(expected)
    assert result.total_tax == pytest.approx(53_703.0)


def test_scenario_scotland_50k():
    result = tax.compute_tax(50_000, "scotland")
    assert result.personal_allowance == 12_570
    assert [b.name for b in result.breakdown] == [
        "Starter rate", "Basic rate", "Intermediate rate",
        "Higher rate", "Advanced rate", "Top rate",
    ]
    amounts = [b.amount for b in result.breakdown]
    assert amounts == pytest.approx([2_827, 12_094, 16_171, 6_338, 0, 0])
    expected = 2_827 * 0.19 + 12_094 * 0.20 + 16_171 * 0.21 + 6_338 * 0.42
    assert result.total_tax == pytest.approx(expected)
    assert result.total_tax == pytest.approx(9_013.80)


def test_taper_zone_income():
    # PA 7,570: basic band ends at 45,270, higher at 125,140
    result = tax.compute_tax(110_000)
    amounts = [b.amount for b in result.breakdown]
    assert amounts == pytest.approx([37_700, 110_000 - 45_270, 0])


def test_income_below_allowance_pays_nothing():
    result = tax.compute_tax(10_000, "scotland")
    assert result.taxable_income == 0
    assert result.total_tax == 0
    assert len(result.breakdown) == 6
    assert all(b.amount == 0 and b.tax == 0 for b in result.breakdown)


def test_breakdown_keeps_every_band():
    for gross in (0, 20_000, 60_000, 200_000):
        assert len(tax.compute_tax(gross, "england").breakdown) == 3
        assert len(tax.compute_tax(gross, "scotland").breakdown) == 6


@pytest.mark.parametrize("region", list(Region))
def test_amounts_sum_to_taxable_income(region):
    for gross in np.linspace(0, 300_000, 301):
        result = tax.compute_tax(gross, region)
        assert sum(b.amount for b in result.breakdown) == pytest.approx(
            max(0.0, gross - result.personal_allowance), abs=1e-6
        )


@pytest.mark.parametrize("region", list(Region))
def test_total_is_sum_of_band_taxes(region):
    for gross in (0, 12_570, 45_000, 99_000, 117_000, 400_000):
        result = tax.compute_tax(gross, region)
        total = 0.0
        for b in result.breakdown:
            total += b.tax
        assert result.total_tax == total


@pytest.mark.parametrize("region", list(Region))
def test_total_tax_non_decreasing(region):
    incomes = np.linspace(0, 250_000, 2_001)
    totals = np.array([tax.compute_tax(g, region).total_tax for g in incomes])
    assert np.all(np.diff(totals) >= -1e-9)


def test_idempotent():
    first = tax.compute_tax(123_456.78, "scotland")
    second = tax.compute_tax(123_456.78, "scotland")
    assert first == second
    assert first.total_tax == second.total_tax


def test_allocate_with_explicit_bands():
    bands = (
        tax.BandThreshold("Low", 0.1, 1_000),
        tax.BandThreshold("High", 0.5, math.inf),
    )
    result = tax.allocate(3_000, bands, 0)
    assert [b.amount for b in result.breakdown] == [1_000, 2_000]
    assert result.total_tax == pytest.approx(1_100)


def test_to_dict():
    d = tax.compute_tax(30_000).to_dict()
    assert d["personal_allowance"] == 12_570
    assert d["breakdown"][0] == {
        "name": "Basic rate", "rate": 0.20, "amount": 17_430, "tax": pytest.approx(3_486),
    }


# ─── Vectorised helpers ──────────────────────────────────────────────

@pytest.mark.parametrize("region", list(Region))
def test_vectorised_income_tax_matches_scalar(region):
    incomes = np.linspace(0, 250_000, 501)
    expected = [tax.compute_tax(g, region).total_tax for g in incomes]
    assert np.allclose(tax.income_tax(incomes, region), expected)


@pytest.mark.parametrize(
    "salary, region, expected",
    [
        (30_000, "england", 20.0),
        (60_000, "england", 40.0),
        (110_000, "england", 60.0),
        (150_000, "england", 45.0),
        (20_000, "scotland", 20.0),
        (50_000, "scotland", 42.0),
        (110_000, "scotland", 67.5),
    ],
)
def test_marginal_rate(salary, region, expected):
    assert tax.marginal_rate(salary, region) == pytest.approx(expected)


def test_effective_rates():
    rates = tax.effective_rates([0, 30_000], "england")
    assert rates[0] == 0
    assert rates[1] == pytest.approx(3_486 / 30_000 * 100)
