"""Default settings for the command line front end.

Settings come from (lowest to highest precedence) built-in defaults, the
environment, a settings file and command line flags.
"""
import json
import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

from .canonical import Direction
from .errors import ConfigError

ENV_DIRECTION = 'HEADER_ANALYZER_DIRECTION'
ENV_CUSTOM_PREFIX = 'HEADER_ANALYZER_CUSTOM_PREFIX'

SETTING_KEYS = ('direction', 'custom_prefix')


@dataclass(frozen=True)
class Settings:
    direction: str = Direction.INBOUND.value
    custom_prefix: str = ''


def _validated(settings: Settings, source: str) -> Settings:
    if settings.direction not in (Direction.INBOUND.value, Direction.OUTBOUND.value):
        raise ConfigError(f"{source}: direction must be 'inbound' or 'outbound', got {settings.direction!r}")
    return settings


def settings_from_env(environ: Optional[Mapping[str, str]] = None, base: Optional[Settings] = None) -> Settings:
    """Overlay HEADER_ANALYZER_* environment variables on `base` (or the defaults)."""
    environ = os.environ if environ is None else environ
    settings = base or Settings()
    direction = environ.get(ENV_DIRECTION)
    if direction:
        settings = replace(settings, direction=direction.strip().lower())
    prefix = environ.get(ENV_CUSTOM_PREFIX)
    if prefix:
        settings = replace(settings, custom_prefix=prefix.strip())
    return _validated(settings, 'environment')


def load_settings_file(path: str, base: Optional[Settings] = None) -> Settings:
    """Load settings from a JSON file or simple whitespace-separated lines.

    JSON format: {"direction": "outbound", "custom_prefix": "X-Acme-"}
    Plain text format: each line `key value`, `#` starts a comment
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            raw = f.read().strip()
    except OSError as e:
        raise ConfigError(f'failed to read settings file {path}: {e}') from e

    values = {}
    try:
        data = json.loads(raw)
    except ValueError:
        data = None
    if isinstance(data, dict):
        values = data
    else:
        for line in raw.splitlines():
            s = line.split('#', 1)[0].strip()
            if not s:
                continue
            parts = s.split(None, 1)
            if len(parts) != 2:
                raise ConfigError(f'{path}: expected `key value`, got {line!r}')
            values[parts[0]] = parts[1].strip()

    unknown = set(values) - set(SETTING_KEYS)
    if unknown:
        raise ConfigError(f"{path}: unknown settings: {', '.join(sorted(unknown))}")
    for key, value in values.items():
        if not isinstance(value, str):
            raise ConfigError(f'{path}: {key} must be a string')

    settings = replace(base or Settings(), **values)
    return _validated(settings, path)
