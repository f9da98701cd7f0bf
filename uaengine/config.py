"""Environment-driven settings for the UA engine."""

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from .exceptions import ConfigurationError


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default) == '1'


def _env_int(name: str, default: str) -> int:
    raw = os.environ.get(name, default)
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ConfigurationError(name, f'expected an integer, got {raw!r}')


@dataclass(frozen=True)
class Settings:
    env: str
    log_level: str
    log_file: Optional[str]
    log_max_bytes: int
    log_backup_count: int
    enable_plugins: bool
    current_ua: Optional[str]
    rate_limit: str
    version: str

    @property
    def is_production(self) -> bool:
        return self.env == 'production'

    @classmethod
    def from_env(cls) -> 'Settings':
        return cls(
            env=os.environ.get('UAENGINE_ENV', 'development').strip().lower(),
            log_level=os.environ.get('UAENGINE_LOG_LEVEL', 'INFO').upper(),
            log_file=os.environ.get('UAENGINE_LOG_FILE') or None,
            log_max_bytes=_env_int('UAENGINE_LOG_MAX_BYTES', str(5 * 1024 * 1024)),
            log_backup_count=_env_int('UAENGINE_LOG_BACKUP_COUNT', '5'),
            enable_plugins=_env_flag('UAENGINE_ENABLE_PLUGINS', '1'),
            current_ua=os.environ.get('UAENGINE_CURRENT_UA'),
            rate_limit=os.environ.get('UAENGINE_RATE_LIMIT', '120 per minute'),
            version=os.environ.get('UAENGINE_VERSION', '1.0.0'),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return process settings; call ``get_settings.cache_clear()`` after changing env."""
    return Settings.from_env()
