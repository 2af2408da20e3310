import pydantic
import pytest

from leanbot_core.config.settings import DEFAULT_WEBHOOK_URL, Settings


def test_defaults(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("LEANBOT_CONFIG_FILE", str(tmp_path / "missing.yaml"))
    monkeypatch.delenv("WEBHOOK_URL", raising=False)
    cfg = Settings(_env_file=None)
    assert cfg.webhook_url == DEFAULT_WEBHOOK_URL
    assert cfg.rate_limit_max_messages == 5
    assert cfg.rate_limit_window_seconds == 60.0
    assert cfg.reveal_chunk_size == 3
    assert cfg.reveal_delay_seconds == 0.05
    assert cfg.session_prefix == "LSC-"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("WEBHOOK_URL", "http://localhost:5678/webhook/chat")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    cfg = Settings(_env_file=None)
    assert cfg.webhook_url == "http://localhost:5678/webhook/chat"
    assert cfg.log_level == "DEBUG"


def test_yaml_config_file(monkeypatch, tmp_path):
    path = tmp_path / "leanbot.yaml"
    path.write_text("reveal_chunk_size: 5\nreveal_enabled: false\n", encoding="utf-8")
    monkeypatch.setenv("LEANBOT_CONFIG_FILE", str(path))
    cfg = Settings(_env_file=None)
    assert cfg.reveal_chunk_size == 5
    assert cfg.reveal_enabled is False


def test_invalid_webhook_url():
    with pytest.raises(pydantic.ValidationError):
        Settings(webhook_url="ftp://example.com/hook", _env_file=None)
