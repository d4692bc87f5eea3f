from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone
from pathlib import Path

import pytest

from pyccsync.config import SyncConfig, parse_start_date
from pyccsync.exceptions import CcConfigError


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in (
        "CC_SYM1",
        "CC_SYM2",
        "CC_START_DATE",
        "CC_API_KEY",
        "CC_API_URL",
        "CC_DATA_DIR",
        "CC_MAX_UNITS_IN_BATCH",
        "CC_REQUEST_TIMEOUT",
    ):
        monkeypatch.delenv(key, raising=False)


def test_defaults_and_derived_names() -> None:
    config = SyncConfig(sym1=" btc ", sym2="usd", start_date="2023-01-01")

    assert config.sym1 == "BTC"
    assert config.sym2 == "USD"
    assert config.pair == "BTC-USD"
    assert config.filename == "BTC_USD_cc.json"
    assert config.data_path == Path(".") / "BTC_USD_cc.json"
    assert config.max_units_in_batch == 2000
    assert config.base_url == "https://min-api.cryptocompare.com"
    assert config.start_date == datetime(2023, 1, 1, tzinfo=UTC)


def test_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("CC_SYM1", "ETH")
    monkeypatch.setenv("CC_SYM2", "EUR")
    monkeypatch.setenv("CC_START_DATE", "2022-06-01T12:00:00Z")
    monkeypatch.setenv("CC_API_KEY", "k3y")
    monkeypatch.setenv("CC_API_URL", "https://example.test/")
    monkeypatch.setenv("CC_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("CC_MAX_UNITS_IN_BATCH", "500")
    monkeypatch.setenv("CC_REQUEST_TIMEOUT", "5")

    config = SyncConfig.from_env()

    assert config.pair == "ETH-EUR"
    assert config.start_date == datetime(2022, 6, 1, 12, tzinfo=UTC)
    assert config.api_key == "k3y"
    assert config.base_url == "https://example.test"
    assert config.data_path == tmp_path / "ETH_EUR_cc.json"
    assert config.max_units_in_batch == 500
    assert config.request_timeout == 5.0


def test_overrides_take_precedence(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CC_SYM1", "ETH")
    monkeypatch.setenv("CC_MAX_UNITS_IN_BATCH", "500")

    config = SyncConfig.from_env(sym1="BTC", sym2="USD", start_date="2023-01-01", max_units_in_batch=2)

    assert config.sym1 == "BTC"
    assert config.max_units_in_batch == 2


def test_missing_required_values() -> None:
    with pytest.raises(CcConfigError, match="sym2, start_date"):
        SyncConfig.from_env(sym1="BTC")


def test_invalid_batch_size_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CC_MAX_UNITS_IN_BATCH", "lots")

    with pytest.raises(CcConfigError, match="CC_MAX_UNITS_IN_BATCH"):
        SyncConfig.from_env(sym1="BTC", sym2="USD", start_date="2023-01-01")


@pytest.mark.parametrize("max_units", [0, -5])
def test_non_positive_batch_size(max_units: int) -> None:
    with pytest.raises(CcConfigError):
        SyncConfig(sym1="BTC", sym2="USD", start_date="2023-01-01", max_units_in_batch=max_units)


@pytest.mark.parametrize("max_units", [2001, 5000])
def test_batch_size_above_remote_window(max_units: int) -> None:
    with pytest.raises(CcConfigError, match="between 1 and 2000"):
        SyncConfig(sym1="BTC", sym2="USD", start_date="2023-01-01", max_units_in_batch=max_units)


def test_batch_size_above_remote_window_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CC_MAX_UNITS_IN_BATCH", "5000")

    with pytest.raises(CcConfigError, match="max_units_in_batch"):
        SyncConfig.from_env(sym1="BTC", sym2="USD", start_date="2023-01-01")


@pytest.mark.parametrize("timeout", [0, -1.5])
def test_non_positive_request_timeout(timeout: float) -> None:
    with pytest.raises(CcConfigError, match="request_timeout"):
        SyncConfig(sym1="BTC", sym2="USD", start_date="2023-01-01", request_timeout=timeout)


def test_empty_symbol() -> None:
    with pytest.raises(CcConfigError):
        SyncConfig(sym1="", sym2="USD", start_date="2023-01-01")


class TestParseStartDate:
    def test_naive_is_utc(self) -> None:
        assert parse_start_date("2023-01-01 06:00") == datetime(2023, 1, 1, 6, tzinfo=UTC)

    def test_offset_is_converted(self) -> None:
        parsed = parse_start_date("2023-01-01T02:00:00+02:00")
        assert parsed == datetime(2023, 1, 1, tzinfo=UTC)
        assert parsed.tzinfo == UTC

    def test_datetime_passthrough(self) -> None:
        value = datetime(2023, 1, 1, 3, tzinfo=timezone(timedelta(hours=3)))
        assert parse_start_date(value) == datetime(2023, 1, 1, tzinfo=UTC)

    def test_invalid(self) -> None:
        with pytest.raises(CcConfigError, match="Invalid start date"):
            parse_start_date("first of january")
