"""Engine facade: cached, plugin-aware parsing plus the query helpers.

An ``Engine`` owns its own cache and plugin list, so independently
configured engines can live side by side. ``UA`` is the process default.

Plugins are consulted in registration order on a cache miss. The first one
whose ``test(raw)`` is true has its ``parse(raw)`` partial overlaid on the
classifier's result. A plugin that raises is logged, counted and skipped.
"""

import dataclasses
import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Tuple, Union

import requests
from flask import has_request_context, request

from . import metrics
from .cache import ParseCache
from .classifier.parser import Classifier, DEFAULT_CLASSIFIER
from .classifier.validator import split_version
from .config import get_settings
from .exceptions import InvalidPluginError
from .forgery import detect_fake_ua
from .generator import generate_ua
from .logging_utils import dev_warning, log_suppressed
from .types import (
    BrowserInfo,
    CPUInfo,
    DeviceInfo,
    EngineInfo,
    FakeUAReport,
    ModernBrowserOptions,
    Ordering,
    OSInfo,
    ParsedUA,
    PartialParsedUA,
    SecurityLevel,
    UAGenerateSpec,
)
from .version_audit import get_security_level, is_modern, is_outdated
from .versioning import ranges

logger = logging.getLogger('uaengine.engine')

_RECORD_TYPES = {
    'browser': BrowserInfo,
    'engine': EngineInfo,
    'os': OSInfo,
    'device': DeviceInfo,
    'cpu': CPUInfo,
}
_FLAGS = ('is_bot', 'is_webview', 'is_headless')


@dataclass(frozen=True)
class Plugin:
    """Classification override for one UA family."""

    test: Callable[[str], bool]
    parse: Callable[[str], Union[PartialParsedUA, ParsedUA, None]]
    name: str = ''

    def __str__(self) -> str:
        return self.name or getattr(self.parse, '__qualname__', 'plugin')


def _as_plugin(candidate: Any) -> Any:
    if isinstance(candidate, Mapping):
        missing = next((k for k in ('test', 'parse') if not callable(candidate.get(k))), None)
        if missing:
            raise InvalidPluginError(candidate, missing)
        return Plugin(candidate['test'], candidate['parse'], str(candidate.get('name') or ''))
    for attr in ('test', 'parse'):
        if not callable(getattr(candidate, attr, None)):
            raise InvalidPluginError(candidate, attr)
    return candidate


def _overlay_record(base, value):
    record_type = type(base)
    if isinstance(value, record_type):
        return value
    if not isinstance(value, Mapping):
        raise TypeError(f'{record_type.__name__} overlay must be a mapping, got {type(value).__name__}')
    fields = {f.name for f in dataclasses.fields(record_type)}
    changes = {k: v for k, v in value.items() if k in fields}
    if record_type is BrowserInfo and 'version' in changes and 'major' not in changes:
        parts = split_version(changes['version'])
        changes.update(version=parts.version, major=parts.major, minor=parts.minor, patch=parts.patch)
    return dataclasses.replace(base, **changes)


def overlay(base: ParsedUA, partial: Union[PartialParsedUA, ParsedUA]) -> ParsedUA:
    """Return ``base`` with the fields of ``partial`` laid over it.

    ``partial`` may be a mapping or a whole ``ParsedUA``. Sub-records may be
    given as records (replace) or mappings (merge).
    ``source`` always stays the raw input.
    """
    if dataclasses.is_dataclass(partial) and not isinstance(partial, type):
        # a whole record, e.g. another ParsedUA
        partial = {f.name: getattr(partial, f.name) for f in dataclasses.fields(partial) if f.name != 'source'}
    changes: Dict[str, Any] = {}
    for key, value in partial.items():
        if key in _RECORD_TYPES:
            changes[key] = _overlay_record(getattr(base, key), value)
        elif key in _FLAGS:
            changes[key] = bool(value)
    return dataclasses.replace(base, **changes)


def get_current_ua() -> str:
    """The host's own UA string.

    Inside a Flask request this is the request's ``User-Agent`` header;
    otherwise ``UAENGINE_CURRENT_UA`` or the HTTP client's default UA.
    """
    if has_request_context():
        return request.headers.get('User-Agent', '')
    configured = get_settings().current_ua
    if configured is not None:
        return configured
    return requests.utils.default_user_agent()


class Engine:
    def __init__(self, enable_plugins: Optional[bool] = None, classifier: Optional[Classifier] = None):
        self.enable_plugins = get_settings().enable_plugins if enable_plugins is None else enable_plugins
        self.classifier = classifier or DEFAULT_CLASSIFIER
        self._cache = ParseCache()
        self._plugins: Tuple[Any, ...] = ()
        self._lock = threading.Lock()
        self._stats = {'total_parses': 0, 'cache_hits': 0, 'plugin_hits': 0, 'plugin_errors': 0}

    # ---------------- parsing -----------------

    def parse(self, raw: Optional[str] = None) -> ParsedUA:
        """Classify ``raw`` (default: the host's own UA), returning the cached record on a hit."""
        if raw is None:
            raw = get_current_ua()
        self._bump('total_parses')
        if not isinstance(raw, str):
            return self.classifier.classify(raw)
        cached = self._cache.get(raw)
        if cached is not None:
            self._bump('cache_hits')
            metrics.record_parse('cache')
            return cached
        with metrics.ParseTimer() as timer:
            result, source = self._classify(raw)
        metrics.record_parse(source, timer.duration)
        return self._cache.setdefault(raw, result)

    def _classify(self, raw: str) -> Tuple[ParsedUA, str]:
        base = self.classifier.classify(raw)
        if not self.enable_plugins:
            return base, 'classifier'
        for plugin in self._plugins:
            try:
                if not plugin.test(raw):
                    continue
                partial = plugin.parse(raw)
                if not partial:
                    continue
                result = overlay(base, partial)
            except Exception as exc:
                self._bump('plugin_errors')
                metrics.record_plugin_error()
                log_suppressed(logger, exc, f'plugin:{plugin}', level=logging.WARNING)
                continue
            self._bump('plugin_hits')
            return result, 'plugin'
        return base, 'classifier'

    @property
    def current(self) -> ParsedUA:
        return self.parse(get_current_ua())

    def _resolve(self, ua: Union[ParsedUA, str]) -> ParsedUA:
        if isinstance(ua, ParsedUA):
            return ua
        return self.parse(ua)

    # ---------------- queries -----------------

    def stringify(self, spec: Union[UAGenerateSpec, ParsedUA, None] = None) -> str:
        return generate_ua(spec)

    def satisfies(self, ua: Union[ParsedUA, str], range_expr: Union[str, Iterable[str]]) -> bool:
        return ranges.satisfies(self._resolve(ua), range_expr)

    def satisfies_all(self, ua: Union[ParsedUA, str], range_exprs: Iterable[str]) -> bool:
        return ranges.satisfies_all(self._resolve(ua), range_exprs)

    def satisfies_any(self, ua: Union[ParsedUA, str], range_exprs: Iterable[str]) -> bool:
        return ranges.satisfies_any(self._resolve(ua), range_exprs)

    def is_modern(self, ua: Union[ParsedUA, str], opts: Union[ModernBrowserOptions, Mapping, None] = None) -> bool:
        return is_modern(self._resolve(ua), opts)

    def is_outdated(self, ua: Union[ParsedUA, str], months_threshold: int = 24) -> bool:
        return is_outdated(self._resolve(ua), months_threshold)

    def security_level(self, ua: Union[ParsedUA, str]) -> SecurityLevel:
        return get_security_level(self._resolve(ua))

    def compare(self, a: Union[ParsedUA, str], b: Union[ParsedUA, str]) -> Ordering:
        return ranges.compare_ua(self._resolve(a), self._resolve(b))

    def detect_fake(self, ua: Union[ParsedUA, str]) -> FakeUAReport:
        raw = ua.source if isinstance(ua, ParsedUA) else ua
        return detect_fake_ua(raw)

    # ---------------- plugins + cache -----------------

    def use(self, plugin) -> None:
        """Append ``plugin`` to the registry. Entries are never de-duplicated."""
        plugin = _as_plugin(plugin)
        if not self.enable_plugins:
            dev_warning(logger, 'Plugins are disabled; ignoring %s', plugin)
            return
        with self._lock:
            self._plugins = self._plugins + (plugin,)
        logger.info('Plugin registered: %s', plugin)

    @property
    def plugins(self) -> Tuple[Any, ...]:
        return self._plugins

    def clear_cache(self) -> None:
        self._cache.clear()

    def get_cache_size(self) -> int:
        return self._cache.size()

    # ---------------- stats -----------------

    def _bump(self, key: str) -> None:
        with self._lock:
            self._stats[key] += 1

    def get_stats(self) -> Dict[str, Any]:
        with self._lock:
            stats: Dict[str, Any] = dict(self._stats)
        total = stats['total_parses']
        stats['cache_hit_rate'] = stats['cache_hits'] / total if total else 0.0
        stats['plugin_count'] = len(self._plugins)
        stats['cache_size'] = self._cache.size()
        return stats

    def reset_stats(self) -> None:
        with self._lock:
            for key in self._stats:
                self._stats[key] = 0


UA = Engine()


def parse_user_agent(raw: Optional[str] = None) -> ParsedUA:
    return UA.parse(raw)


def is_compatible(range_expr: Union[str, Iterable[str]], ua: Union[ParsedUA, str, None] = None) -> bool:
    """Check ``ua`` (default: the host's own UA) against ``range_expr``."""
    return UA.satisfies(ua if ua is not None else get_current_ua(), range_expr)
