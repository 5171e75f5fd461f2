"""
Tests for FX API endpoints.

Tests the /api/v1/fx endpoints:
- POST /fx/convert - Bulk conversion with partial failures
- POST /fx/aggregate - Multi-currency totals
"""
from datetime import timedelta

import httpx
import pytest

from couplesfin.config import get_settings, set_test_mode

# Test mode must be set BEFORE importing the app
set_test_mode(True)

from couplesfin.main import app
from couplesfin.utils.datetime_utils import utcnow

settings = get_settings()
API_BASE = f"http://test{settings.API_V1_PREFIX}"


def _client() -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url=API_BASE)


def _brl_table(updated_at=None) -> dict:
    """1 BRL = 0.20 USD = 0.25 EUR."""
    timestamp = (updated_at or utcnow()).isoformat()
    return {
        "base_currency": "BRL",
        "rates": [
            {"base": "BRL", "quote": "USD", "rate": "0.20", "updated_at": timestamp},
            {"base": "BRL", "quote": "EUR", "rate": "0.25", "updated_at": timestamp},
            ],
        }


# ============================================================
# POST /fx/convert
# ============================================================

@pytest.mark.asyncio
async def test_convert_bulk():
    payload = {
        "conversions": [
            {"amount": "100", "from": "BRL", "to": "USD"},
            {"amount": "10", "from": "USD", "to": "EUR"},
            {"amount": "12.345", "from": "EUR", "to": "EUR"},
            ],
        "rate_table": _brl_table(),
        }
    async with _client() as client:
        response = await client.post("/fx/convert", json=payload)

    assert response.status_code == 200, response.text
    data = response.json()
    assert data["success_count"] == 3
    assert data["errors"] == []
    assert data["stale"] is False

    direct, cross, identity = data["results"]
    assert direct["converted_amount"] == "20.00"
    assert direct["from_currency"] == "BRL"
    assert cross["converted_amount"] == "12.50"
    assert identity["converted_amount"] == "12.345"
    assert identity["rate"] is None


@pytest.mark.asyncio
async def test_convert_partial_failure():
    payload = {
        "conversions": [
            {"amount": "100", "from": "BRL", "to": "USD"},
            {"amount": "100", "from": "BRL", "to": "GBP"},
            ],
        "rate_table": _brl_table(),
        }
    async with _client() as client:
        response = await client.post("/fx/convert", json=payload)

    assert response.status_code == 200
    data = response.json()
    assert data["success_count"] == 1
    assert len(data["errors"]) == 1
    failed = data["results"][1]
    assert failed["converted_amount"] is None
    assert failed["error"] == "No FX rate path from BRL to GBP"


@pytest.mark.asyncio
async def test_convert_all_failed_returns_404():
    payload = {
        "conversions": [{"amount": "1", "from": "USD", "to": "GBP"}],
        "rate_table": _brl_table(),
        }
    async with _client() as client:
        response = await client.post("/fx/convert", json=payload)

    assert response.status_code == 404
    assert "All conversions failed" in response.json()["detail"]


@pytest.mark.asyncio
async def test_convert_stale_table_flagged():
    payload = {
        "conversions": [{"amount": "1", "from": "BRL", "to": "USD"}],
        "rate_table": _brl_table(utcnow() - timedelta(hours=settings.FX_RATE_MAX_AGE_HOURS + 1)),
        }
    async with _client() as client:
        response = await client.post("/fx/convert", json=payload)

    assert response.status_code == 200
    assert response.json()["stale"] is True


@pytest.mark.asyncio
async def test_convert_stale_warning_logged_once(monkeypatch):
    from couplesfin.services import fx as fx_service

    calls = []
    original = fx_service.warn_if_stale

    def counting_warn_if_stale(rate_table):
        calls.append(rate_table)
        return original(rate_table)

    monkeypatch.setattr(fx_service, "warn_if_stale", counting_warn_if_stale)
    payload = {
        "conversions": [
            {"amount": "1", "from": "BRL", "to": "USD"},
            {"amount": "2", "from": "BRL", "to": "EUR"},
            ],
        "rate_table": _brl_table(utcnow() - timedelta(days=30)),
        }
    async with _client() as client:
        response = await client.post("/fx/convert", json=payload)

    assert response.status_code == 200
    assert response.json()["stale"] is True
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_convert_rejects_non_positive_rate():
    table = _brl_table()
    table["rates"][0]["rate"] = "0"
    payload = {"conversions": [{"amount": "1", "from": "BRL", "to": "USD"}], "rate_table": table}
    async with _client() as client:
        response = await client.post("/fx/convert", json=payload)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_convert_rejects_empty_list():
    async with _client() as client:
        response = await client.post("/fx/convert", json={"conversions": [], "rate_table": _brl_table()})
    assert response.status_code == 422


# ============================================================
# POST /fx/aggregate
# ============================================================

@pytest.mark.asyncio
async def test_aggregate():
    payload = {
        "items": [
            {"amount": "150.10", "currency": "BRL"},
            {"amount": "20", "currency": "USD"},
            {"amount": "0.2", "currency": "BRL"},
            ],
        "target_currency": "brl",
        "rate_table": _brl_table(),
        }
    async with _client() as client:
        response = await client.post("/fx/aggregate", json=payload)

    assert response.status_code == 200, response.text
    assert response.json() == {"total": "250.30", "currency": "BRL", "item_count": 3}


@pytest.mark.asyncio
async def test_aggregate_empty():
    payload = {"items": [], "target_currency": "USD", "rate_table": _brl_table()}
    async with _client() as client:
        response = await client.post("/fx/aggregate", json=payload)
    assert response.status_code == 200
    assert response.json()["total"] == "0.00"


@pytest.mark.asyncio
async def test_aggregate_missing_rate_returns_404():
    payload = {
        "items": [{"amount": "1", "currency": "GBP"}],
        "target_currency": "BRL",
        "rate_table": _brl_table(),
        }
    async with _client() as client:
        response = await client.post("/fx/aggregate", json=payload)

    assert response.status_code == 404
    assert response.json()["detail"] == "No FX rate path from GBP to BRL"
