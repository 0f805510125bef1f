"""
Flask web application for the UK salary calculator.

Single-file app using render_template_string. Two calculator pages
(salary -> hourly at ``/``, hourly -> salary at ``/hourly``) plus a JSON
endpoint at ``/api/tax``. Run via ``python main.py`` which starts the dev
server on localhost:5000.
"""

from __future__ import annotations

from typing import Any, Dict, Tuple

from flask import Flask, jsonify, render_template_string, request

import config as cfg
import tax
from cli import calculate, compute_display_data, fmt, pct
from config import Region
from pay import WorkPattern
import report

app = Flask(__name__)

PAGES = {
    "salary": {
        "endpoint": "salary_page",
        "title": "Salary to Hourly",
        "subtitle": "Turn an annual salary into weekly, daily and hourly pay, before and after income tax.",
        "amount_label": "Annual gross salary",
        "default": cfg.DEFAULT_SALARY,
        "other": "hourly",
    },
    "hourly": {
        "endpoint": "hourly_page",
        "title": "Hourly to Salary",
        "subtitle": "Turn an hourly rate into an annual salary, before and after income tax.",
        "amount_label": "Hourly rate",
        "default": cfg.DEFAULT_HOURLY,
        "other": "salary",
    },
}

# ═══════════════════════════════════════════════════════════════════
# Form parsing
# ═══════════════════════════════════════════════════════════════════

def _parse_currency(s: str) -> float:
    return float(str(s).replace("£", "").replace(",", "").replace(" ", ""))


def parse_form(form: dict, mode: str) -> Tuple[float, WorkPattern, Region]:
    """Parse the HTML form into ``(amount, pattern, region)``.

    Raises ValueError on anything that is not a usable number.
    """
    amount = _parse_currency(form.get("amount", PAGES[mode]["default"]))
    if amount < 0:
        raise ValueError(f"{PAGES[mode]['amount_label']} must not be negative")
    pattern = WorkPattern(
        hours_per_week=float(form.get("hours", cfg.DEFAULT_HOURS_PER_WEEK)),
        weeks_per_year=float(form.get("weeks", cfg.DEFAULT_WEEKS_PER_YEAR)),
        days_per_week=float(form.get("days", cfg.DEFAULT_DAYS_PER_WEEK)),
    )
    region = tax.resolve_region(form.get("region"))
    return amount, pattern, region


# ═══════════════════════════════════════════════════════════════════
# HTML Template
# ═══════════════════════════════════════════════════════════════════

HTML_TEMPLATE = r"""
<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>UK Salary Calculator: {{ page.title }}</title>
<style>
  *{margin:0;padding:0;box-sizing:border-box}

  :root{
    --bg-deep:#050816;
    --bg-surface:rgba(15,23,42,0.55);
    --bg-input:rgba(8,11,22,0.85);
    --border-subtle:rgba(99,102,241,0.1);
    --text-primary:#f1f5f9;
    --text-secondary:#94a3b8;
    --text-muted:#64748b;
    --indigo:#818cf8;
    --indigo-deep:#6366f1;
    --violet:#8b5cf6;
    --emerald:#34d399;
    --red:#f87171;
    --radius-lg:16px;
    --radius-md:10px;
  }

  body{
    background:var(--bg-deep);color:var(--text-primary);
    font-family:system-ui,-apple-system,sans-serif;
    line-height:1.6;min-height:100vh;
  }

  .container{max-width:1000px;margin:0 auto;padding:2rem 1.5rem}

  /* ── hero header ── */
  .hero{text-align:center;padding:1.5rem 0 2rem}
  .hero h1{font-size:clamp(1.5rem,4vw,2.3rem);font-weight:800;letter-spacing:-.035em}
  .hero-sub{color:var(--text-secondary);margin-top:.6rem;font-size:.92rem}
  .nav{margin-top:1rem;font-size:.86rem}
  .nav a{color:var(--indigo)}

  /* ── cards ── */
  .card{
    background:var(--bg-surface);border:1px solid var(--border-subtle);
    border-radius:var(--radius-lg);padding:1.8rem;margin-bottom:1.4rem;
  }
  h2{font-size:1.1rem;font-weight:700;margin-bottom:1rem}

  /* ── form ── */
  .form-grid{display:grid;grid-template-columns:repeat(auto-fill,minmax(200px,1fr));gap:1rem 1.5rem}
  .form-group{display:flex;flex-direction:column}
  .form-group label{font-size:.78rem;color:var(--text-secondary);margin-bottom:.3rem;font-weight:500}
  .form-group input,.form-group select{
    background:var(--bg-input);border:1px solid rgba(71,85,105,.35);
    border-radius:var(--radius-md);color:var(--text-primary);
    padding:.6rem .85rem;font-size:.88rem;font-family:inherit;
  }

  /* ── buttons ── */
  .btn{
    display:inline-flex;align-items:center;padding:.7rem 1.8rem;border:none;
    border-radius:var(--radius-md);font-size:.92rem;font-weight:600;
    cursor:pointer;text-decoration:none;font-family:inherit;
  }
  .btn-primary{background:linear-gradient(135deg,var(--indigo-deep),var(--violet));color:#fff}
  .btn-ghost{color:var(--text-secondary);border:1px solid rgba(71,85,105,.45);margin-left:.6rem}

  .error{
    background:rgba(248,113,113,.08);border:1px solid rgba(248,113,113,.3);
    color:var(--red);border-radius:var(--radius-md);padding:.8rem 1rem;margin-bottom:1.4rem;
  }

  /* ── stat rows ── */
  .grid-2{display:grid;grid-template-columns:1fr 1fr;gap:1.4rem;margin-bottom:1.4rem}
  .grid-2 .card{margin-bottom:0}
  @media(max-width:768px){.grid-2{grid-template-columns:1fr}}
  .stat-row{display:flex;justify-content:space-between;padding:.5rem 0;border-bottom:1px solid rgba(51,65,85,.3)}
  .stat-row:last-child{border-bottom:none}
  .stat-label{color:var(--text-secondary);font-size:.86rem}
  .stat-value{font-weight:600;font-size:.86rem;font-variant-numeric:tabular-nums}
  .net .stat-value{color:var(--emerald)}
  .note{color:var(--text-muted);font-size:.8rem;margin-top:.8rem}

  /* ── band table ── */
  .band-table{width:100%;border-collapse:collapse;font-size:.84rem}
  .band-table th{
    text-align:left;padding:.65rem .8rem;background:rgba(15,23,42,.45);
    color:var(--text-secondary);font-size:.76rem;text-transform:uppercase;letter-spacing:.05em;
  }
  .band-table td{padding:.5rem .8rem;border-bottom:1px solid rgba(51,65,85,.15);font-variant-numeric:tabular-nums}

  .chart-img{width:100%;border-radius:var(--radius-md);margin-bottom:.5rem}
  .footer{text-align:center;color:var(--text-muted);font-size:.78rem;padding:1.5rem 0}
</style>
</head>
<body>
<div class="container">

<header class="hero">
  <h1>{{ page.title }}</h1>
  <p class="hero-sub">{{ page.subtitle }}</p>
  <p class="nav">
    Need it the other way round?
    <a href="{{ url_for(pages[page.other].endpoint) }}">{{ pages[page.other].title }}</a>
  </p>
</header>

<!-- Input Form -->
<div class="card">
  <h2>Your Details</h2>
  <form method="POST" id="calc-form">
    <div class="form-grid">
      <div class="form-group">
        <label>{{ page.amount_label }}</label>
        <input type="text" name="amount" value="{{ form.amount if form.amount is defined else page.default }}">
      </div>
      <div class="form-group">
        <label>Hours per week</label>
        <input type="number" step="0.1" min="0" name="hours" value="{{ form.hours or defaults.hours }}">
      </div>
      <div class="form-group">
        <label>Weeks per year</label>
        <input type="number" step="1" min="0" name="weeks" value="{{ form.weeks or defaults.weeks }}">
      </div>
      <div class="form-group">
        <label>Days per week</label>
        <input type="number" step="0.5" min="0" name="days" value="{{ form.days or defaults.days }}">
      </div>
      <div class="form-group">
        <label>Region</label>
        <select name="region">
          {% for r in regions %}
          <option value="{{ r.value }}" {{ 'selected' if (form.region or default_region) == r.value }}>{{ r.label }}</option>
          {% endfor %}
        </select>
      </div>
      <div class="form-group">
        <label>Tax year</label>
        <select name="tax_year"><option value="{{ tax_year }}" selected>{{ tax_year }}</option></select>
      </div>
    </div>
    <div style="margin-top:1.2rem">
      <button type="submit" class="btn btn-primary">Calculate</button>
      <a class="btn btn-ghost" href="{{ url_for(page.endpoint) }}">Reset</a>
    </div>
  </form>
</div>

{% if error %}
<div class="error">{{ error }}</div>
{% endif %}

{% if d %}
<!-- Gross / Net -->
<div class="grid-2">
  <div class="card">
    <h2>Gross Pay</h2>
    <div class="stat-row"><span class="stat-label">Annual salary</span><span class="stat-value" id="result-salary">{{ fmt(d.annual) }}</span></div>
    <div class="stat-row"><span class="stat-label">Weekly</span><span class="stat-value" id="result-weekly">{{ fmt(d.weekly) }}</span></div>
    <div class="stat-row"><span class="stat-label">Daily</span><span class="stat-value" id="result-daily">{{ fmt(d.daily) }}</span></div>
    <div class="stat-row"><span class="stat-label">Hourly</span><span class="stat-value" id="result-hourly">{{ fmt(d.hourly) }}</span></div>
  </div>
  <div class="card net">
    <h2>Take-Home Pay</h2>
    <div class="stat-row"><span class="stat-label">Annual</span><span class="stat-value" id="result-net-annual">{{ fmt(d.net_annual) }}</span></div>
    <div class="stat-row"><span class="stat-label">Weekly</span><span class="stat-value" id="result-net-weekly">{{ fmt(d.net_weekly) }}</span></div>
    <div class="stat-row"><span class="stat-label">Daily</span><span class="stat-value" id="result-net-daily">{{ fmt(d.net_daily) }}</span></div>
    <div class="stat-row"><span class="stat-label">Hourly</span><span class="stat-value" id="result-net-hourly">{{ fmt(d.net_hourly) }}</span></div>
    <p class="note">After income tax only. National Insurance, student loan and pension are not deducted.</p>
  </div>
</div>

<!-- Tax summary -->
<div class="card">
  <h2>Income Tax ({{ d.region_label }}, {{ d.tax_year }})</h2>
  <div class="stat-row"><span class="stat-label">Personal allowance</span><span class="stat-value" id="result-personal-allowance">{{ fmt(d.personal_allowance) }}</span></div>
  <div class="stat-row"><span class="stat-label">Taxable income</span><span class="stat-value" id="result-taxable-income">{{ fmt(d.taxable_income) }}</span></div>
  <div class="stat-row"><span class="stat-label">Total income tax</span><span class="stat-value" id="result-tax-total">{{ fmt(d.total_tax) }}</span></div>
  <div class="stat-row"><span class="stat-label">Effective rate</span><span class="stat-value" id="result-effective-rate">{{ pct(d.effective_rate) }}</span></div>
  <div class="stat-row"><span class="stat-label">Marginal rate</span><span class="stat-value">{{ pct(d.marginal_rate) }}</span></div>
  {% if d.tapered %}
  <p class="note">Your personal allowance is tapered: it drops by &pound;1 for every &pound;2 of income over &pound;100,000.</p>
  {% endif %}

  {% if d.bands %}
  <table class="band-table" style="margin-top:1rem">
    <thead><tr><th>Band</th><th>Rate</th><th>Income in band</th><th>Tax</th></tr></thead>
    <tbody id="tax-breakdown-body">
      {% for b in d.bands %}
      <tr>
        <td>{{ b.name }}</td>
        <td>{{ "%.0f"|format(b.rate * 100) }}%</td>
        <td>{{ fmt(b.amount) }}</td>
        <td>{{ fmt(b.tax) }}</td>
      </tr>
      {% endfor %}
    </tbody>
  </table>
  {% else %}
  <p class="note">No income above the personal allowance, so no income tax is due.</p>
  {% endif %}
</div>

{% for img in charts %}
<div class="card">
  <img class="chart-img" src="data:image/png;base64,{{ img }}" alt="Income tax chart {{ loop.index }}">
</div>
{% endfor %}
{% endif %}

<div class="footer">Estimates only, using {{ tax_year }} income tax bands. Not financial advice.</div>
</div>
</body>
</html>
"""


# ═══════════════════════════════════════════════════════════════════
# Routes
# ═══════════════════════════════════════════════════════════════════

def _render(mode: str, form: Dict[str, Any], d=None, charts=None, error: str = ""):
    return render_template_string(
        HTML_TEMPLATE,
        page=PAGES[mode],
        pages=PAGES,
        form=form,
        d=d,
        charts=charts or [],
        error=error,
        regions=list(Region),
        default_region=cfg.DEFAULT_REGION.value,
        tax_year=cfg.TAX_YEAR,
        defaults={
            "hours": cfg.DEFAULT_HOURS_PER_WEEK,
            "weeks": cfg.DEFAULT_WEEKS_PER_YEAR,
            "days": cfg.DEFAULT_DAYS_PER_WEEK,
        },
        fmt=fmt,
        pct=pct,
    )


def _calculator(mode: str):
    # GET shows the defaults already calculated
    form = request.form.to_dict() if request.method == "POST" else {}
    try:
        amount, pattern, region = parse_form(form, mode)
        p = calculate(mode, amount, pattern, region)
    except ValueError as exc:
        app.logger.info("Rejected %s input %r: %s", mode, form, exc)
        return _render(mode, form, error=f"Please check your inputs: {exc}")

    d = compute_display_data(p)
    app.logger.debug("Calculated %s %.2f (%s): tax %.2f",
                     mode, amount, region.value, d["total_tax"])
    try:
        charts = report.get_web_charts(p)
    except (ValueError, OverflowError) as exc:
        app.logger.warning("Charts skipped for %s %r: %s", mode, amount, exc)
        charts = []
    return _render(mode, form, d=d, charts=charts)


@app.route("/", methods=["GET", "POST"])
def salary_page():
    return _calculator("salary")


@app.route("/hourly", methods=["GET", "POST"])
def hourly_page():
    return _calculator("hourly")


@app.route("/api/tax")
def api_tax():
    raw_income = request.args.get("income", "")
    region = tax.resolve_region(request.args.get("region"))
    try:
        income = _parse_currency(raw_income)
        result = tax.compute_tax(income, region)
    except ValueError as exc:
        app.logger.info("Rejected API income %r: %s", raw_income, exc)
        return jsonify({"error": str(exc) or "Invalid income"}), 400

    body = result.to_dict()
    body["region"] = region.value
    body["effective_rate"] = result.total_tax / income * 100 if income > 0 else 0.0
    return jsonify(body)


# ═══════════════════════════════════════════════════════════════════
# Entry point
# ═══════════════════════════════════════════════════════════════════

def run_web(host: str = "127.0.0.1", port: int = 5000, debug: bool = True,
            open_browser: bool = True) -> None:
    """Start the Flask development server and open browser."""
    import webbrowser
    import threading

    url = f"http://localhost:{port}"
    print(f"Starting web app at {url}")
    if open_browser:
        threading.Timer(1.0, lambda: webbrowser.open(url)).start()
    app.run(host=host, port=port, debug=debug)


if __name__ == "__main__":
    run_web()
