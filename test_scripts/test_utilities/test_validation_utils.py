"""
Tests for reusable field validators and datetime helpers.
"""
from datetime import date, datetime, timezone

import pytest

from couplesfin.utils.datetime_utils import parse_ISO_datetime, utcnow
from couplesfin.utils.validation_utils import normalize_currency_code, validate_cpf_field


class TestNormalizeCurrencyCode:

    @pytest.mark.parametrize("raw,expected", [("brl", "BRL"), ("  usd ", "USD"), ("EuR", "EUR")])
    def test_normalizes(self, raw, expected):
        assert normalize_currency_code(raw) == expected

    def test_rejects_unknown(self):
        with pytest.raises(ValueError, match="Invalid currency code: 'XYZ'"):
            normalize_currency_code("XYZ")

    def test_rejects_wrong_length(self):
        with pytest.raises(ValueError, match="Invalid currency code"):
            normalize_currency_code("REAL")

    def test_rejects_empty(self):
        with pytest.raises(ValueError, match="cannot be empty"):
            normalize_currency_code("   ")

    def test_rejects_non_string(self):
        with pytest.raises(ValueError, match="must be a string"):
            normalize_currency_code(986)


class TestValidateCpfField:

    def test_valid_is_stored_as_digits(self):
        assert validate_cpf_field("529.982.247-25") == "52998224725"

    def test_empty_becomes_none(self):
        assert validate_cpf_field("") is None
        assert validate_cpf_field(None) is None

    def test_incomplete_raises_form_message(self):
        with pytest.raises(ValueError, match="CPF incompleto"):
            validate_cpf_field("529.982")

    def test_invalid_raises_form_message(self):
        with pytest.raises(ValueError, match="CPF inválido"):
            validate_cpf_field("529.982.247-24")

    def test_non_string(self):
        with pytest.raises(ValueError):
            validate_cpf_field(52998224725)


# ============================================================================
# DATETIME
# ============================================================================

def test_utcnow_is_aware():
    assert utcnow().tzinfo is not None


def test_parse_iso_z_suffix():
    parsed = parse_ISO_datetime("2026-10-19T09:00:00Z")
    assert parsed == datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc)


def test_parse_naive_assumed_utc():
    parsed = parse_ISO_datetime(datetime(2026, 1, 1, 12, 0))
    assert parsed.tzinfo == timezone.utc


def test_parse_date_is_midnight_utc():
    assert parse_ISO_datetime(date(2026, 1, 1)) == datetime(2026, 1, 1, tzinfo=timezone.utc)


def test_parse_invalid():
    with pytest.raises(ValueError):
        parse_ISO_datetime("yesterday")
    with pytest.raises(ValueError):
        parse_ISO_datetime(12345)
