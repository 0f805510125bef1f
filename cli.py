"""
CLI interface and shared display-data computation for the
UK salary calculator.
"""

from __future__ import annotations

import math
import sys
from typing import Any, Dict, List, Optional, Sequence, Tuple

import config as cfg
import pay
import tax
from config import Region
from pay import PayBreakdown, WorkPattern
import report


# ═══════════════════════════════════════════════════════════════════
# Formatting helpers
# ═══════════════════════════════════════════════════════════════════

def fmt(val: float, decimals: int = 2) -> str:
    """Format number as £X,XXX.XX."""
    if val < 0:
        return f"-£{-val:,.{decimals}f}"
    return f"£{val:,.{decimals}f}"


def pct(val: float, decimals: int = 1) -> str:
    return f"{val:.{decimals}f}%"


def visible_bands(breakdown: Sequence[tax.BandAmount]) -> List[tax.BandAmount]:
    """Bands with income in them; empty bands are not displayed."""
    return [b for b in breakdown if b.amount > 0]


# ═══════════════════════════════════════════════════════════════════
# Input collection (CLI)
# ═══════════════════════════════════════════════════════════════════

def _strip_currency(s: str) -> str:
    """Remove currency symbols, commas, spaces."""
    return s.replace("£", "").replace(",", "").replace(" ", "")


def _prompt_float(
    label: str,
    default: Any,
    min_val: float | None = None,
    max_val: float | None = None,
    currency: bool = False,
    exclusive_min: bool = False,
) -> float:
    while True:
        raw = input(f"  {label} [{default}]: ").strip()
        if not raw:
            return float(_strip_currency(str(default))) if currency else float(default)
        try:
            val = float(_strip_currency(raw) if currency else raw)
            if not math.isfinite(val):
                print("    Must be a finite number")
                continue
            if min_val is not None and (val < min_val or (exclusive_min and val == min_val)):
                qualifier = "greater than" if exclusive_min else "at least"
                print(f"    Must be {qualifier} {min_val}")
                continue
            if max_val is not None and val > max_val:
                print(f"    Must be at most {max_val}")
                continue
            return val
        except ValueError:
            print("    Invalid number, try again.")


def _prompt_choice(label: str, options: list[str], default: str) -> str:
    opts = "/".join(options)
    while True:
        raw = input(f"  {label} ({opts}) [{default}]: ").strip().lower()
        if not raw:
            return default
        if raw in options:
            return raw
        print(f"    Choose from: {opts}")


def collect_inputs() -> Tuple[str, float, WorkPattern, Region]:
    """Prompt the user for the calculation mode and its parameters.

    Returns ``(mode, amount, pattern, region)`` where *mode* is
    ``'salary'`` (amount is an annual salary) or ``'hourly'``.
    """
    print("\n  Enter your details (press Enter for defaults):\n")

    mode = _prompt_choice("Convert from", ["salary", "hourly"], "salary")
    if mode == "salary":
        amount = _prompt_float("Annual gross salary", f"£{cfg.DEFAULT_SALARY:,}",
                               0, currency=True)
    else:
        amount = _prompt_float("Hourly rate", f"£{cfg.DEFAULT_HOURLY:.2f}",
                               0, currency=True)
    hours = _prompt_float("Hours per week", cfg.DEFAULT_HOURS_PER_WEEK, 0, 168,
                          exclusive_min=True)
    weeks = _prompt_float("Weeks per year", cfg.DEFAULT_WEEKS_PER_YEAR, 0, 53,
                          exclusive_min=True)
    days = _prompt_float("Days per week", cfg.DEFAULT_DAYS_PER_WEEK, 0, 7,
                         exclusive_min=True)
    region = _prompt_choice("Region", [r.value for r in Region], cfg.DEFAULT_REGION.value)

    pattern = WorkPattern(hours_per_week=hours, weeks_per_year=weeks, days_per_week=days)
    return mode, amount, pattern, Region(region)


# ═══════════════════════════════════════════════════════════════════
# Shared display-data computation (used by CLI and web app)
# ═══════════════════════════════════════════════════════════════════

def calculate(
    mode: str,
    amount: float,
    pattern: WorkPattern,
    region: Region | str,
) -> PayBreakdown:
    """Run the conversion matching *mode* (``'salary'`` or ``'hourly'``)."""
    if mode == "hourly":
        return pay.from_hourly(amount, pattern, region)
    return pay.from_salary(amount, pattern, region)


def compute_display_data(p: PayBreakdown) -> Dict[str, Any]:
    """Extract every metric needed for the output sections."""
    t = p.tax
    return {
        # Inputs echo
        "region": p.region.value,
        "region_label": p.region.label,
        "tax_year": cfg.TAX_YEAR,
        "hours_per_week": p.pattern.hours_per_week,
        "weeks_per_year": p.pattern.weeks_per_year,
        "days_per_week": p.pattern.days_per_week,
        # Gross
        "annual": p.annual,
        "weekly": p.weekly,
        "daily": p.daily,
        "hourly": p.hourly,
        # Net
        "net_annual": p.net_annual,
        "net_weekly": p.net_weekly,
        "net_daily": p.net_daily,
        "net_hourly": p.net_hourly,
        # Tax summary
        "personal_allowance": t.personal_allowance,
        "taxable_income": t.taxable_income,
        "total_tax": t.total_tax,
        "effective_rate": p.effective_rate,
        "marginal_rate": p.marginal_rate,
        "tapered": t.personal_allowance < cfg.PERSONAL_ALLOWANCE,
        # Band table
        "bands": visible_bands(t.breakdown),
    }


# ═══════════════════════════════════════════════════════════════════
# Box-drawing CLI output
# ═══════════════════════════════════════════════════════════════════

W = 62  # box width (characters)
_H = "═"


def _box_top(title: str) -> str:
    inner = W - 2
    return (
        f"╔{_H * inner}╗\n"
        f"║  {title:<{inner - 2}}║\n"
        f"╠{_H * inner}╣"
    )


def _box_line(text: str = "") -> str:
    inner = W - 4
    if len(text) > inner:
        text = text[:inner]
    return f"║  {text:<{inner}}║"


def _box_row(label: str, value: str, lw: int = 32) -> str:
    return _box_line(f"{label:<{lw}}{value}")


def _box_bottom() -> str:
    return f"╚{_H * (W - 2)}╝"


def _print_section(title: str, rows: List[str]) -> None:
    """Print a titled box with content rows."""
    print(_box_top(title))
    for r in rows:
        print(r)
    print(_box_bottom())
    print()


# ═══════════════════════════════════════════════════════════════════
# CLI Section Printers
# ═══════════════════════════════════════════════════════════════════

def _print_gross(d: Dict[str, Any]) -> None:
    rows = [
        _box_row("Annual salary", fmt(d["annual"])),
        _box_row("Weekly pay", fmt(d["weekly"])),
        _box_row("Daily pay", fmt(d["daily"])),
        _box_row("Hourly rate", fmt(d["hourly"])),
        _box_line(),
        _box_row("Pattern", f"{d['hours_per_week']:g}h/wk, {d['weeks_per_year']:g} wks, "
                            f"{d['days_per_week']:g} days/wk"),
    ]
    _print_section("GROSS PAY", rows)


def _print_net(d: Dict[str, Any]) -> None:
    rows = [
        _box_row("Annual take-home", fmt(d["net_annual"])),
        _box_row("Weekly take-home", fmt(d["net_weekly"])),
        _box_row("Daily take-home", fmt(d["net_daily"])),
        _box_row("Hourly take-home", fmt(d["net_hourly"])),
    ]
    _print_section("TAKE-HOME PAY (AFTER INCOME TAX)", rows)


def _print_tax(d: Dict[str, Any]) -> None:
    rows = [
        _box_row("Region", f"{d['region_label']} ({d['tax_year']})"),
        _box_row("Personal allowance", fmt(d["personal_allowance"])),
        _box_row("Taxable income", fmt(d["taxable_income"])),
        _box_row("Income tax", fmt(d["total_tax"])),
        _box_row("Effective rate", pct(d["effective_rate"])),
        _box_row("Marginal rate", pct(d["marginal_rate"])),
    ]
    if d["tapered"]:
        rows.append(_box_line())
        rows.append(_box_line("NOTE: Personal allowance is tapered (income"))
        rows.append(_box_line("over £100,000 loses £1 of allowance per £2)."))
    _print_section("INCOME TAX", rows)


def _print_bands(d: Dict[str, Any]) -> None:
    h1 = f"{'Band':<20}{'Rate':>6}  {'Income':>13}  {'Tax':>13}"
    rows = [_box_line(h1), _box_line("─" * (W - 6))]
    for b in d["bands"]:
        rows.append(_box_line(
            f"{b.name:<20}{pct(b.rate * 100, 0):>6}  "
            f"{fmt(b.amount):>13}  {fmt(b.tax):>13}"
        ))
    if not d["bands"]:
        rows.append(_box_line("No income above the personal allowance."))
    _print_section("TAX BREAKDOWN", rows)


def print_report(d: Dict[str, Any]) -> None:
    _print_gross(d)
    _print_net(d)
    _print_tax(d)
    _print_bands(d)


# ═══════════════════════════════════════════════════════════════════
# Main CLI entry point
# ═══════════════════════════════════════════════════════════════════

def run_cli(pdf_path: Optional[str] = None) -> None:
    """Run the full CLI workflow."""
    # Ensure box-drawing characters render on Windows
    try:
        sys.stdout.reconfigure(encoding="utf-8")
    except (AttributeError, OSError, ValueError):
        pass
    print()
    print("=" * W)
    print(f"  UK Salary Calculator ({cfg.TAX_YEAR})")
    print("=" * W)

    while True:
        mode, amount, pattern, region = collect_inputs()
        try:
            p = calculate(mode, amount, pattern, region)
            break
        except ValueError as exc:
            print(f"\n  Cannot calculate: {exc}. Please try again.")
    d = compute_display_data(p)

    print()
    print_report(d)

    if pdf_path is None and _prompt_choice("Save PDF report?", ["yes", "no"], "no") == "yes":
        pdf_path = "salary_report.pdf"
    if pdf_path:
        print("\n  Generating PDF report...")
        try:
            report.generate_pdf(p, pdf_path)
        except OSError as exc:
            print(f"  Could not save report: {exc}\n")
        else:
            print(f"  Saved to {pdf_path}\n")


if __name__ == "__main__":
    run_cli()
