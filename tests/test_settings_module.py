from __future__ import annotations

import logging
import os
from pathlib import Path

import pytest

from tmx_loader import LoaderSettings
from tmx_loader.errors import InvalidArgumentError


def test_settings_defaults(monkeypatch) -> None:
    monkeypatch.delenv("TMX_DECODE_WORKERS", raising=False)
    monkeypatch.delenv("TMX_LOG_LEVEL", raising=False)

    s = LoaderSettings.load(dotenv_path="definitely_missing.env")
    assert s.decode_workers == 1
    assert s.log_level == "WARNING"
    assert s.log_level_number == logging.WARNING


def test_settings_load_env_only(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("TMX_DECODE_WORKERS", "4")
    monkeypatch.setenv("TMX_LOG_LEVEL", "debug")

    s = LoaderSettings.load(dotenv_path=tmp_path / "nope.env")
    assert s.decode_workers == 4
    assert s.log_level == "DEBUG"


def test_settings_load_dotenv(tmp_path: Path, monkeypatch) -> None:
    # setenv first so the undo also removes what load_dotenv writes
    monkeypatch.setenv("TMX_DECODE_WORKERS", "1")
    monkeypatch.delenv("TMX_DECODE_WORKERS")
    monkeypatch.setenv("TMX_LOG_LEVEL", "ERROR")

    env_file = tmp_path / ".env"
    env_file.write_text("TMX_DECODE_WORKERS=3\nTMX_LOG_LEVEL=INFO\n", encoding="utf-8")

    s = LoaderSettings.load(dotenv_path=env_file)
    assert s.decode_workers == 3
    # already-set variables win over the .env file
    assert s.log_level == "ERROR"


def test_settings_load_dotenv_restores_environment(tmp_path: Path) -> None:
    before = os.environ.get("TMX_DECODE_WORKERS")
    env_file = tmp_path / ".env"
    env_file.write_text("TMX_DECODE_WORKERS=3\n", encoding="utf-8")

    with pytest.MonkeyPatch.context() as mp:
        mp.setenv("TMX_DECODE_WORKERS", "1")
        mp.delenv("TMX_DECODE_WORKERS")
        assert LoaderSettings.load(dotenv_path=env_file).decode_workers == 3

    assert os.environ.get("TMX_DECODE_WORKERS") == before


@pytest.mark.parametrize("workers", ["zero", "1.5"])
def test_settings_bad_workers(monkeypatch, workers: str) -> None:
    monkeypatch.setenv("TMX_DECODE_WORKERS", workers)
    with pytest.raises(InvalidArgumentError):
        LoaderSettings.load(dotenv_path="definitely_missing.env")


def test_settings_validation() -> None:
    with pytest.raises(InvalidArgumentError):
        LoaderSettings(decode_workers=0)
    with pytest.raises(InvalidArgumentError):
        LoaderSettings(log_level="LOUD")
