"""
PDF report generation and reusable chart rendering for the
UK salary calculator.

Provides:
  - Two-page PDF report (generate_pdf)
  - Base64-encoded chart images for web embedding (get_web_charts)
"""

from __future__ import annotations

import base64
import io
from typing import List

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.backends.backend_pdf import PdfPages
from matplotlib.ticker import FuncFormatter
import numpy as np

import config as cfg
import tax
from pay import PayBreakdown

# ═══════════════════════════════════════════════════════════════════
# Style constants
# ═══════════════════════════════════════════════════════════════════

BG = "#0a101f"
CARD = "#131b2e"
TEXT = "#f1f5f9"
TEXT2 = "#cbd5e1"
INDIGO = "#818cf8"
EMERALD = "#34d399"
AMBER = "#fbbf24"
RED = "#f87171"
SLATE = "#94a3b8"
BORDER = "#1e293b"

# One colour per band, lowest rate first
BAND_COLORS = [EMERALD, "#2dd4bf", INDIGO, AMBER, "#fb923c", RED]

A4W, A4H = 8.27, 11.69
WEB_W, WEB_H = 10, 6


# ═══════════════════════════════════════════════════════════════════
# Axis formatters
# ═══════════════════════════════════════════════════════════════════

def _gbp_fmt(x, _):
    if abs(x) >= 1e6:
        return f"£{x / 1e6:.1f}M"
    if abs(x) >= 1e3:
        return f"£{x / 1e3:.0f}k"
    return f"£{x:.0f}"


def _pct_fmt(x, _):
    return f"{x:.0f}%"


GBP_FMT = FuncFormatter(_gbp_fmt)
PCT_FMT = FuncFormatter(_pct_fmt)


# ═══════════════════════════════════════════════════════════════════
# Style helpers
# ═══════════════════════════════════════════════════════════════════

def _style(fig, *axes):
    """Apply dark theme to figure and all axes."""
    fig.patch.set_facecolor(BG)
    for ax in axes:
        ax.set_facecolor(CARD)
        ax.tick_params(colors=TEXT, labelsize=8)
        ax.xaxis.label.set_color(TEXT)
        ax.yaxis.label.set_color(TEXT)
        ax.title.set_color(TEXT)
        for spine in ax.spines.values():
            spine.set_color(BORDER)
        ax.grid(True, alpha=0.15, color=SLATE)


def _legend(ax, loc="upper left"):
    ax.legend(loc=loc, fontsize=8, facecolor=CARD, edgecolor=BORDER, labelcolor=TEXT)


# ═══════════════════════════════════════════════════════════════════
# Charts
# ═══════════════════════════════════════════════════════════════════

def _chart_bands(p: PayBreakdown, figsize=(WEB_W, WEB_H)) -> plt.Figure:
    """Horizontal bars: income and tax in every band of the region."""
    breakdown = p.tax.breakdown
    fig, ax = plt.subplots(figsize=figsize, constrained_layout=True)
    _style(fig, ax)

    y = np.arange(len(breakdown))
    xmax = min(max(max(b.amount for b in breakdown) * 1.15, 1.0), cfg.CHART_INCOME_CAP)
    amounts = np.minimum([b.amount for b in breakdown], xmax)
    taxes = np.minimum([b.tax for b in breakdown], xmax)
    colors = [BAND_COLORS[i % len(BAND_COLORS)] for i in range(len(breakdown))]

    ax.barh(y, amounts, 0.6, color=colors, alpha=0.35, label="Income in band")
    ax.barh(y, taxes, 0.6, color=colors, label="Tax in band")
    for i, b in enumerate(breakdown):
        if 0 < b.amount <= xmax:
            ax.annotate(f"£{b.tax:,.0f}", xy=(b.amount, i), fontsize=7,
                        color=TEXT2, va="center",
                        xytext=(4, 0), textcoords="offset points")

    ax.set_yticks(y)
    ax.set_yticklabels([f"{b.name} ({b.rate * 100:.0f}%)" for b in breakdown], fontsize=8)
    ax.invert_yaxis()
    ax.set_xlim(0, xmax)
    ax.xaxis.set_major_formatter(GBP_FMT)
    ax.set_xlabel("Gross income")
    ax.set_title(
        f"Income Tax by Band: £{p.annual:,.0f} ({p.region.label})",
        fontsize=11, pad=10,
    )
    _legend(ax, loc="lower right")
    return fig


def _chart_rates(p: PayBreakdown, figsize=(WEB_W, WEB_H)) -> plt.Figure:
    """Effective and marginal income tax rate across the income range."""
    top = min(max(cfg.CHART_MAX_INCOME, p.annual * 1.2), cfg.CHART_INCOME_CAP)
    incomes = np.linspace(0, top, 801)
    effective = tax.effective_rates(incomes, p.region)
    it = tax.income_tax(incomes, p.region)
    marginal = np.gradient(it, incomes) * 100

    fig, ax = plt.subplots(figsize=figsize, constrained_layout=True)
    _style(fig, ax)

    ax.plot(incomes, marginal, color=AMBER, linewidth=1.5, label="Marginal rate")
    ax.plot(incomes, effective, color=INDIGO, linewidth=2.2, label="Effective rate")
    ax.fill_between(incomes, 0, effective, color=INDIGO, alpha=0.12)

    # PA taper zone
    ax.axvspan(cfg.PA_TAPER_THRESHOLD, cfg.PA_TAPER_END, alpha=0.06, color=RED)
    ax.annotate("PA taper", xy=(cfg.PA_TAPER_THRESHOLD, 72), fontsize=7,
                color=RED, alpha=0.8, xytext=(4, 0), textcoords="offset points")

    # Current salary marker
    if p.annual <= top:
        ax.axvline(p.annual, color=EMERALD, linewidth=1, linestyle=":", alpha=0.8)
        ax.annotate(f"You: {p.effective_rate:.1f}%",
                    xy=(p.annual, p.effective_rate), fontsize=7, color=EMERALD,
                    xytext=(6, -12), textcoords="offset points")

    ax.set_xlim(0, top)
    ax.set_ylim(0, 80)
    ax.xaxis.set_major_formatter(GBP_FMT)
    ax.yaxis.set_major_formatter(PCT_FMT)
    ax.set_xlabel("Gross annual income")
    ax.set_ylabel("Income tax rate")
    ax.set_title(f"Effective vs Marginal Rate ({p.region.label}, {cfg.TAX_YEAR})",
                 fontsize=11, pad=10)
    _legend(ax)
    return fig


# ═══════════════════════════════════════════════════════════════════
# Public API
# ═══════════════════════════════════════════════════════════════════

def figure_to_base64(fig: plt.Figure) -> str:
    """Convert a matplotlib figure to a base64-encoded PNG string."""
    buf = io.BytesIO()
    fig.savefig(buf, format="png", facecolor=fig.get_facecolor(),
                dpi=120, bbox_inches="tight")
    buf.seek(0)
    b64 = base64.b64encode(buf.read()).decode()
    buf.close()
    return b64


def generate_pdf(p: PayBreakdown, path: str = "salary_report.pdf") -> str:
    """Generate the PDF report. Returns the file path."""
    pages = [
        _chart_bands(p, figsize=(A4W, A4H * 0.5)),
        _chart_rates(p, figsize=(A4W, A4H * 0.5)),
    ]
    try:
        with PdfPages(path) as pdf:
            for fig in pages:
                pdf.savefig(fig, facecolor=fig.get_facecolor())
    finally:
        for fig in pages:
            plt.close(fig)
    return path


def get_web_charts(p: PayBreakdown) -> List[str]:
    """Return base64-encoded PNG chart images for web embedding.

    Returns 2 charts:
      [0] Tax by band
      [1] Effective vs marginal rate curve
    """
    chart_figs = [_chart_bands(p), _chart_rates(p)]
    images = [figure_to_base64(f) for f in chart_figs]
    for f in chart_figs:
        plt.close(f)
    return images
