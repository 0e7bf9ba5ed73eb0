from homework_gateway.core import config
from homework_gateway.core.config import load_cfg, load_settings


def test_fixed_limits():
    assert config.UPSTREAM_TIMEOUT_S == 30.0
    assert config.MAX_PAYLOAD_BYTES == 100 * 1024
    assert config.MAX_MESSAGES == 50
    assert config.MAX_CONTENT_CHARS == 10_000
    assert config.TEMPERATURE == 0.7
    assert config.MAX_OUTPUT_TOKENS == 1000


def test_packaged_gateway_yml_loads():
    cfg = load_cfg()
    up = cfg["upstream"]
    assert up["base_url"].startswith("https://")
    assert up["api_key_env"] == "LOVABLE_API_KEY"


def test_load_settings_reads_credential_from_env(monkeypatch):
    monkeypatch.setenv("MY_KEY", "  sk-123  ")
    s = load_settings({"upstream": {"base_url": "https://x/v1/", "model": "m", "api_key_env": "MY_KEY"}})
    assert s.api_key == "sk-123"
    assert s.base_url == "https://x/v1"
    assert s.image_model == "m"


def test_load_settings_missing_credential_is_empty(monkeypatch):
    monkeypatch.delenv("MY_KEY", raising=False)
    s = load_settings({"upstream": {"base_url": "https://x/v1", "model": "m", "api_key_env": "MY_KEY"}})
    assert s.api_key == ""
