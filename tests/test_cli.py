from __future__ import annotations

import json
from pathlib import Path

import pytest

from pyccsync.cli import main


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


def test_mock_run_writes_dataset(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main(["btc", "usd", "2023-01-01", "--mock", "--data-dir", str(tmp_path), "--max-units", "2000"])

    assert exit_code == 0
    out = capsys.readouterr().out
    assert "--- Fetching cryptocompare data for BTC-USD from 2023-01-01 00:00:00 until now ---" in out
    assert "----------- DONE -----------" in out

    records = json.loads((tmp_path / "BTC_USD_cc.json").read_text(encoding="utf-8"))
    stamps = [r["time"] for r in records]
    assert stamps == sorted(stamps, reverse=True)
    assert len(stamps) == len(set(stamps))
    assert stamps[-1] <= 1_672_531_200


def test_second_run_resumes_from_file(tmp_path: Path) -> None:
    args = ["BTC", "USD", "2023-01-01", "--mock", "--data-dir", str(tmp_path)]
    assert main(args) == 0
    first = json.loads((tmp_path / "BTC_USD_cc.json").read_text(encoding="utf-8"))

    assert main(args) == 0
    second = json.loads((tmp_path / "BTC_USD_cc.json").read_text(encoding="utf-8"))

    assert {r["time"] for r in first} <= {r["time"] for r in second}


def test_invalid_start_date_is_usage_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main(["BTC", "USD", "not-a-date", "--mock", "--data-dir", str(tmp_path)])

    assert exit_code == 2
    assert "Invalid start date" in capsys.readouterr().err


def test_corrupted_file_is_replaced(tmp_path: Path) -> None:
    path = tmp_path / "BTC_USD_cc.json"
    path.write_text("{corrupted", encoding="utf-8")

    assert main(["BTC", "USD", "2023-01-01", "--mock", "--data-dir", str(tmp_path)]) == 0
    assert isinstance(json.loads(path.read_text(encoding="utf-8")), list)


def test_batch_size_above_remote_window_is_usage_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main(["BTC", "USD", "2023-01-01", "--mock", "--data-dir", str(tmp_path), "--max-units", "5000"])

    assert exit_code == 2
    assert "between 1 and 2000" in capsys.readouterr().err
    assert not (tmp_path / "BTC_USD_cc.json").exists()
