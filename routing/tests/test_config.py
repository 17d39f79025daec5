import pytest

from transitrouting.config import Config
from transitrouting.exceptions import InvalidConfigurationError


def test_defaults_validate(monkeypatch):
    for name in ('CATALOGUE_INPUT', 'PORT', 'LOG_LEVEL', 'JSON_INDENT'):
        monkeypatch.delenv(name, raising=False)
    config = Config()
    config.validate()
    assert config.get_api_config() == {'host': config.host, 'port': 5000, 'debug': config.debug}


def test_port_out_of_range(monkeypatch):
    monkeypatch.setenv('PORT', '70000')
    with pytest.raises(InvalidConfigurationError):
        Config().validate()


def test_unknown_log_level(monkeypatch):
    monkeypatch.setenv('LOG_LEVEL', 'chatty')
    with pytest.raises(InvalidConfigurationError):
        Config().validate()


def test_missing_input_document(monkeypatch, tmp_path):
    monkeypatch.setenv('CATALOGUE_INPUT', str(tmp_path / 'missing.json'))
    with pytest.raises(InvalidConfigurationError):
        Config().validate()
