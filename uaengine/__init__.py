import logging
from typing import Any, Dict, Optional

from flask import Flask, jsonify
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from .config import Settings, get_settings
from .engine import Engine, Plugin, UA, get_current_ua, is_compatible, parse_user_agent
from .exceptions import (
    IncomparableBrowsersError,
    UAEngineException,
    error_response,
)
from .classifier import parse_ua
from .forgery import detect_fake_ua
from .generator import DEFAULT_UA, TEMPLATES, generate_ua, supported_combinations, template
from .types import (
    BrowserInfo,
    CPUInfo,
    DeviceInfo,
    DeviceType,
    EngineInfo,
    FakeUAReport,
    ModernBrowserOptions,
    Ordering,
    OSInfo,
    ParsedUA,
    ParsedVersion,
    SecurityLevel,
    UAGenerateSpec,
    VersionRange,
)
from .version_audit import get_security_level, is_modern, is_outdated
from .versioning import (
    compare_ua,
    compare_versions,
    parse_version,
    parse_version_range,
    satisfies,
    satisfies_all,
    satisfies_any,
)

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'


def _configure_logging(settings: Settings) -> None:
    level = getattr(logging, settings.log_level, logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    # Optional rotating file handler for persistent logs
    if settings.log_file:
        try:
            from logging.handlers import RotatingFileHandler
            fh = RotatingFileHandler(
                settings.log_file, maxBytes=settings.log_max_bytes, backupCount=settings.log_backup_count)
            fh.setLevel(level)
            fh.setFormatter(logging.Formatter(LOG_FORMAT))
            logging.getLogger().addHandler(fh)
            logging.getLogger(__name__).info(
                'RotatingFileHandler attached path=%s max_bytes=%d backups=%d',
                settings.log_file, settings.log_max_bytes, settings.log_backup_count)
        except OSError:
            logging.getLogger(__name__).warning('failed attaching RotatingFileHandler for %s', settings.log_file)
    logging.getLogger('werkzeug').setLevel(logging.WARNING)
    logging.getLogger(__name__).info('Logging initialized at level %s', settings.log_level)


def create_app(config: Optional[Dict[str, Any]] = None) -> Flask:
    settings = get_settings()
    app = Flask(__name__)
    if config:
        app.config.update(config)
    app.config['UAENGINE_VERSION'] = settings.version

    _configure_logging(settings)

    limiter = Limiter(
        key_func=get_remote_address,
        app=app,
        default_limits=[settings.rate_limit],
        storage_uri='memory://',
    )
    # Expose limiter for blueprints to use specific limits
    app.extensions['limiter'] = limiter

    from .routes import system_bp, ua_bp
    app.register_blueprint(system_bp)
    app.register_blueprint(ua_bp)

    @app.errorhandler(UAEngineException)
    def _handle_engine_error(exc: UAEngineException):
        body, status = error_response(exc)
        if status >= 500:
            logging.getLogger('uaengine.routes').error('%s: %s', exc.error_code, exc.message)
        return jsonify(body), status

    rule_paths = sorted({r.rule for r in app.url_map.iter_rules()})
    logging.getLogger(__name__).info('Route map initialized count=%d sample=%s', len(rule_paths), rule_paths[:15])
    return app


__all__ = [
    'create_app',
    'Engine', 'Plugin', 'UA', 'get_current_ua', 'is_compatible', 'parse_user_agent',
    'parse_ua', 'generate_ua', 'supported_combinations', 'template', 'TEMPLATES', 'DEFAULT_UA',
    'detect_fake_ua', 'is_modern', 'is_outdated', 'get_security_level',
    'compare_ua', 'compare_versions', 'parse_version', 'parse_version_range',
    'satisfies', 'satisfies_all', 'satisfies_any',
    'BrowserInfo', 'EngineInfo', 'OSInfo', 'DeviceInfo', 'DeviceType', 'CPUInfo', 'ParsedUA',
    'ParsedVersion', 'VersionRange', 'ModernBrowserOptions', 'FakeUAReport', 'UAGenerateSpec',
    'Ordering', 'SecurityLevel',
    'UAEngineException', 'IncomparableBrowsersError',
]
