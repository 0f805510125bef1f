"""
UK Income Tax constants for the salary calculator.

All monetary values in GBP. Tax year 2025/26.
Band widths are in *taxable* income (i.e. above the personal allowance),
not gross endpoints.
"""

from enum import Enum

TAX_YEAR = "2025/26"

# ── Personal Allowance ───────────────────────────────────────────────
PERSONAL_ALLOWANCE = 12_570
PA_TAPER_THRESHOLD = 100_000       # PA reduces £1 per £2 above this
PA_TAPER_END = PA_TAPER_THRESHOLD + 2 * PERSONAL_ALLOWANCE   # 125,140

# Top band always starts here, whatever is left of the PA
TOP_RATE_THRESHOLD = 125_140


# ── Regions & band extents ───────────────────────────────────────────

class Region(str, Enum):
    ENGLAND = "england"      # England, Wales and Northern Ireland
    SCOTLAND = "scotland"

    @property
    def label(self) -> str:
        return REGION_LABELS[self]


class Extent(Enum):
    """Upper limit of a band that has no fixed taxable width."""

    TOP_RATE = "top_rate"      # ends at TOP_RATE_THRESHOLD
    UNBOUNDED = "unbounded"    # no upper limit


DEFAULT_REGION = Region.ENGLAND

REGION_LABELS = {
    Region.ENGLAND: "England/Wales/NI",
    Region.SCOTLAND: "Scotland",
}

# Lower-cased identifiers accepted for each region
REGION_ALIASES = {
    "england": Region.ENGLAND,
    "england/wales/ni": Region.ENGLAND,
    "eng_2025_26": Region.ENGLAND,
    "scotland": Region.SCOTLAND,
    "sco_2025_26": Region.SCOTLAND,
}


# ── Income Tax (England, Wales & NI) ─────────────────────────────────
# Bands: (name, rate, taxable width | Extent)
INCOME_TAX_BANDS_ENGLAND = (
    ("Basic rate", 0.20, 37_700),
    ("Higher rate", 0.40, Extent.TOP_RATE),
    ("Additional rate", 0.45, Extent.UNBOUNDED),
)

# ── Income Tax (Scotland) ────────────────────────────────────────────
INCOME_TAX_BANDS_SCOTLAND = (
    ("Starter rate", 0.19, 2_827),
    ("Basic rate", 0.20, 12_094),          # 14,921 - 2,827
    ("Intermediate rate", 0.21, 16_171),   # 31,092 - 14,921
    ("Higher rate", 0.42, 31_338),         # 62,430 - 31,092
    ("Advanced rate", 0.45, Extent.TOP_RATE),
    ("Top rate", 0.48, Extent.UNBOUNDED),
)

RATE_TEMPLATES = {
    Region.ENGLAND: INCOME_TAX_BANDS_ENGLAND,
    Region.SCOTLAND: INCOME_TAX_BANDS_SCOTLAND,
}


# ── Calculator defaults (also used by the Reset button) ──────────────
DEFAULT_SALARY = 30_000
DEFAULT_HOURLY = 15.0
DEFAULT_HOURS_PER_WEEK = 37.5
DEFAULT_WEEKS_PER_YEAR = 52
DEFAULT_DAYS_PER_WEEK = 5

# Income range covered by the rate-curve chart
CHART_MAX_INCOME = 200_000
# Upper limit on the chart x-axis however large the salary
CHART_INCOME_CAP = 1_000_000_000
