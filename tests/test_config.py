import pytest
from pydantic import ValidationError

from serfsd.config import SDConfig
from serfsd.settings import load_settings


def test_defaults():
    c = SDConfig()
    assert c.address == "localhost:7373"
    assert c.refresh_interval == 30
    assert c.tag_separator == ","


@pytest.mark.parametrize("kwargs", [{"refresh_interval": 0}, {"refresh_interval": -5}, {"address": ""}])
def test_invalid_values_rejected(kwargs):
    with pytest.raises(ValidationError):
        SDConfig(**kwargs)


def test_config_is_immutable():
    c = SDConfig()
    with pytest.raises(ValidationError):
        c.refresh_interval = 5


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("SERFSD_LISTEN_ADDRESS", "serf:7373")
    monkeypatch.setenv("SERFSD_REFRESH_INTERVAL", "15")
    monkeypatch.setenv("SERFSD_ENABLE_WEB", "yes")
    monkeypatch.setenv("SERFSD_WEB_PORT", "not-a-number")
    monkeypatch.setenv("SERFSD_LOG_LEVEL", "debug")
    s = load_settings()
    assert s.listen_address == "serf:7373"
    assert s.refresh_interval == 15
    assert s.enable_web is True
    assert s.web_port == 8000
    assert s.log_level == "DEBUG"
