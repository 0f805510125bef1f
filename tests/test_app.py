"""Tests for the Flask web app."""

import pytest

import app as web


@pytest.fixture
def client():
    web.app.config["TESTING"] = True
    with web.app.test_client() as c:
        yield c


def test_salary_page_shows_defaults(client):
    resp = client.get("/")
    assert resp.status_code == 200
    html = resp.get_data(as_text=True)
    assert "Salary to Hourly" in html
    assert "£3,486.00" in html           # tax on the default £30,000
    assert "data:image/png;base64," in html


def test_hourly_page_shows_defaults(client):
    resp = client.get("/hourly")
    assert resp.status_code == 200
    html = resp.get_data(as_text=True)
    assert "Hourly to Salary" in html
    assert "£29,250.00" in html          # £15 x 37.5h x 52 weeks


def test_salary_post_scotland(client):
    resp = client.post("/", data={
        "amount": "£50,000", "hours": "37.5", "weeks": "52", "days": "5",
        "region": "scotland",
    })
    html = resp.get_data(as_text=True)
    assert resp.status_code == 200
    assert "£9,013.80" in html
    assert "Intermediate rate" in html
    assert "Top rate" not in html        # empty bands are hidden


def test_invalid_input_shows_error(client):
    resp = client.post("/", data={"amount": "lots", "hours": "37.5", "weeks": "52", "days": "5"})
    html = resp.get_data(as_text=True)
    assert resp.status_code == 200
    assert "Please check your inputs" in html


def test_zero_hours_rejected(client):
    resp = client.post("/hourly", data={"amount": "15", "hours": "0", "weeks": "52", "days": "5"})
    assert "Hours per week must be greater than 0" in resp.get_data(as_text=True)


def test_negative_salary_rejected(client):
    resp = client.post("/", data={"amount": "-100", "hours": "37.5", "weeks": "52", "days": "5"})
    assert "must not be negative" in resp.get_data(as_text=True)


def test_api_tax(client):
    resp = client.get("/api/tax?income=150000&region=england")
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["region"] == "england"
    assert body["personal_allowance"] == 0
    assert body["total_tax"] == pytest.approx(53_703)
    assert body["effective_rate"] == pytest.approx(53_703 / 150_000 * 100)
    assert [b["name"] for b in body["breakdown"]] == ["Basic rate", "Higher rate", "Additional rate"]


def test_api_unknown_region_falls_back(client):
    body = client.get("/api/tax?income=40000&region=mars").get_json()
    assert body["region"] == "england"


@pytest.mark.parametrize("income", ["", "abc", "-5", "nan"])
def test_api_rejects_bad_income(client, income):
    resp = client.get(f"/api/tax?income={income}")
    assert resp.status_code == 400
    assert "error" in resp.get_json()


def test_huge_salary_still_renders(client):
    resp = client.post("/", data={"amount": "1.6e308", "hours": "37.5", "weeks": "52", "days": "5"})
    assert resp.status_code == 200
    assert "Take-Home Pay" in resp.get_data(as_text=True)
