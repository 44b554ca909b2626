from __future__ import annotations

from pathlib import Path

import pytest

from settings import LotterySettings, get_settings


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_settings_defaults(monkeypatch):
    for name in ("LOTTERY_CONFIG_PATH", "LOTTERY_STORAGE_DIR", "LOTTERY_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)

    settings = LotterySettings(_env_file=None)

    assert settings.config_path == Path("lottery.json")
    assert settings.storage_dir == Path(".lottery")
    assert settings.log_level == "INFO"
    assert settings.draw_animation_frames == 5


def test_settings_read_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("LOTTERY_STORAGE_DIR", str(tmp_path))
    monkeypatch.setenv("LOTTERY_LOG_LEVEL", "debug")
    monkeypatch.setenv("LOTTERY_DRAW_ANIMATION_FRAMES", "0")

    settings = get_settings()

    assert settings.storage_dir == tmp_path
    assert settings.log_level == "DEBUG"
    assert settings.draw_animation_frames == 0
    assert get_settings() is settings
