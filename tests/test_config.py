import json

import pytest

from header_analyzer.config import Settings, load_settings_file, settings_from_env
from header_analyzer.errors import ConfigError


def test_defaults():
    assert settings_from_env({}) == Settings(direction='inbound', custom_prefix='')


def test_env_overrides(monkeypatch):
    monkeypatch.setenv('HEADER_ANALYZER_DIRECTION', ' Outbound ')
    monkeypatch.setenv('HEADER_ANALYZER_CUSTOM_PREFIX', 'X-Acme-')
    assert settings_from_env() == Settings(direction='outbound', custom_prefix='X-Acme-')


def test_env_invalid_direction():
    with pytest.raises(ConfigError):
        settings_from_env({'HEADER_ANALYZER_DIRECTION': 'sideways'})


def test_json_settings_file(tmp_path):
    p = tmp_path / 'settings.json'
    p.write_text(json.dumps({'direction': 'outbound'}))
    base = Settings(custom_prefix='X-From-Env')
    assert load_settings_file(str(p), base=base) == Settings(direction='outbound', custom_prefix='X-From-Env')


def test_plain_settings_file(tmp_path):
    p = tmp_path / 'settings.txt'
    p.write_text('# analyzer defaults\ndirection outbound\ncustom_prefix X-Acme-  # highlight ours\n')
    assert load_settings_file(str(p)) == Settings(direction='outbound', custom_prefix='X-Acme-')


def test_settings_file_errors(tmp_path):
    with pytest.raises(ConfigError):
        load_settings_file(str(tmp_path / 'missing.json'))

    unknown = tmp_path / 'unknown.json'
    unknown.write_text(json.dumps({'colour': 'blue'}))
    with pytest.raises(ConfigError):
        load_settings_file(str(unknown))

    bad_direction = tmp_path / 'bad.txt'
    bad_direction.write_text('direction up\n')
    with pytest.raises(ConfigError):
        load_settings_file(str(bad_direction))
