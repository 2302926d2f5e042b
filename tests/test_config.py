from pathlib import Path

from allowlist.api import config


def test_default_path_without_env(monkeypatch):
    monkeypatch.delenv("KSU_ALLOWLIST_PATH", raising=False)
    cfg = config.AllowListConfig.from_env()
    assert cfg.allowlist_path == Path("/data/adb/ksu/.allowlist")
    assert config.default_allowlist_path() == config.DEFAULT_ALLOWLIST_PATH


def test_env_override(monkeypatch, tmp_path):
    monkeypatch.setenv("KSU_ALLOWLIST_PATH", f"  {tmp_path / 'allowlist'}  ")
    assert config.default_allowlist_path() == tmp_path / "allowlist"


def test_blank_env_falls_back(monkeypatch):
    monkeypatch.setenv("KSU_ALLOWLIST_PATH", "   ")
    assert config.default_allowlist_path() == config.DEFAULT_ALLOWLIST_PATH
