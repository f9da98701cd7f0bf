"""Synthesize User-Agent strings from a partial ``UAGenerateSpec``.

Each OS family has a builder that renders three fragments: the system
parenthetical, the engine token and the browser token. ``generate_ua``
joins them as ``Mozilla/5.0 <system> <engine> <browser>``.
"""

import logging
from dataclasses import asdict, is_dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

from . import metrics
from .classifier.patterns import WINDOWS_NT_NAMES
from .classifier.validator import split_version
from .exceptions import UnsupportedPlatformError, ValidationError
from .logging_utils import dev_warning
from .types import UAGenerateSpec

logger = logging.getLogger('uaengine.generator')

DEFAULT_UA = (
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
    '(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36'
)

DEFAULT_SPEC: Dict[str, Dict[str, Any]] = {
    'browser': {'name': 'Chrome', 'version': '120.0.0.0'},
    'engine': {'name': 'Blink'},
    'os': {'name': 'Windows', 'version': '10'},
    'device': {'type': 'desktop'},
    'cpu': {'architecture': 'amd64'},
}

DEFAULT_BROWSER_VERSIONS = {
    'Chrome': '120.0.0.0',
    'Edge': '120.0.0.0',
    'Firefox': '120.0',
    'Safari': '17.0',
    'Opera': '106.0.0.0',
    'Samsung': '23.0',
}

DEFAULT_OS_VERSIONS = {
    'Windows': '10',
    'macOS': '10.15.7',
    'iOS': '17.0',
    'Android': '14',
    'Linux': '',
}

# marketing name -> NT number; '11' still reports NT 10.0
_NT_VERSIONS = {name: nt for nt, name in WINDOWS_NT_NAMES.items() if nt != '5.2'}
_NT_VERSIONS['11'] = '10.0'

WEBKIT = 'AppleWebKit/537.36 (KHTML, like Gecko)'
APPLE_WEBKIT = 'AppleWebKit/605.1.15 (KHTML, like Gecko)'
GECKO = 'Gecko/20100101'


def _section(value: Any) -> Dict[str, Any]:
    if value is None:
        return {}
    if is_dataclass(value):
        return asdict(value)
    if isinstance(value, Mapping):
        return dict(value)
    raise TypeError(f'expected a mapping, got {type(value).__name__}')


def fill_spec(spec: Optional[UAGenerateSpec]) -> Dict[str, Dict[str, Any]]:
    """Complete ``spec`` from the default table.

    A section the caller omitted is taken whole from ``DEFAULT_SPEC``. A
    browser or OS given by name only gets that family's default version.
    """
    given = _section(spec)
    filled: Dict[str, Dict[str, Any]] = {}
    for key, default in DEFAULT_SPEC.items():
        section = {k: v for k, v in _section(given.get(key)).items() if v not in (None, '')}
        filled[key] = {**default, **section} if not section.get('name') else section
    browser, system = filled['browser'], filled['os']
    if not browser.get('version'):
        browser['version'] = DEFAULT_BROWSER_VERSIONS.get(browser.get('name'), '')
    if 'version' not in system:
        system['version'] = DEFAULT_OS_VERSIONS.get(system.get('name'), '')
    filled['device'].setdefault('type', 'desktop')
    filled['cpu'].setdefault('architecture', 'amd64')
    return filled


class PlatformBuilder:
    """Renders UA fragments for one OS family."""

    os_name = ''
    browsers: Tuple[str, ...] = ()

    def build(self, spec: Dict[str, Dict[str, Any]]) -> str:
        browser = spec['browser'].get('name')
        if browser not in self.browsers:
            raise UnsupportedPlatformError(self.os_name, browser or '')
        parts = ['Mozilla/5.0', self.system_info(spec), self.engine_info(spec), self.browser_info(spec)]
        return ' '.join(' '.join(parts).split())

    def system_info(self, spec) -> str:
        raise NotImplementedError

    def engine_info(self, spec) -> str:
        if spec['browser']['name'] == 'Firefox':
            return GECKO
        return WEBKIT

    def browser_info(self, spec) -> str:
        browser = spec['browser']
        version = browser['version']
        name = browser['name']
        if name == 'Firefox':
            return f'Firefox/{version}'
        if name == 'Safari':
            return f'Version/{version} Safari/605.1.15'
        safari = 'Mobile Safari/537.36' if self.mobile(spec) else 'Safari/537.36'
        if name == 'Chrome':
            return f'Chrome/{version} {safari}'
        chromium = self.chromium_version(spec)
        if name == 'Edge':
            return f'Chrome/{chromium} {safari} {self.edge_token}/{version}'
        if name == 'Opera':
            return f'Chrome/{chromium} {safari} OPR/{version}'
        if name == 'Samsung':
            return f'SamsungBrowser/{version} Chrome/{chromium} {safari}'
        raise UnsupportedPlatformError(self.os_name, name)

    edge_token = 'Edg'

    @staticmethod
    def chromium_version(spec) -> str:
        """Chrome/ token for Chromium-based browsers.

        A Blink engine version wins. Otherwise Edge, whose majors track
        Chromium, reports its own major; Opera and Samsung number
        independently and get the default Chromium version.
        """
        engine = spec['engine']
        if engine.get('name') == 'Blink' and engine.get('version'):
            return engine['version']
        browser = spec['browser']
        if browser['name'] == 'Edge':
            major = split_version(browser['version']).major
            if major is not None:
                return f'{major}.0.0.0'
        return DEFAULT_BROWSER_VERSIONS['Chrome']

    def mobile(self, spec) -> bool:
        return False

    @staticmethod
    def firefox_rv(spec) -> str:
        if spec['browser']['name'] != 'Firefox':
            return ''
        return f'; rv:{spec["browser"]["version"]}'


class WindowsBuilder(PlatformBuilder):
    os_name = 'Windows'
    browsers = ('Chrome', 'Edge', 'Firefox', 'Opera')

    def system_info(self, spec) -> str:
        nt = _NT_VERSIONS.get(str(spec['os'].get('version') or '10'), '10.0')
        arch = {'amd64': '; Win64; x64', 'arm64': '; ARM64'}.get(spec['cpu'].get('architecture'), '')
        return f'(Windows NT {nt}{arch}{self.firefox_rv(spec)})'


class MacBuilder(PlatformBuilder):
    os_name = 'macOS'
    browsers = ('Chrome', 'Edge', 'Firefox', 'Safari', 'Opera')

    def system_info(self, spec) -> str:
        version = (spec['os'].get('version') or DEFAULT_OS_VERSIONS['macOS']).replace('.', '_')
        return f'(Macintosh; Intel Mac OS X {version}{self.firefox_rv(spec)})'

    def engine_info(self, spec) -> str:
        if spec['browser']['name'] == 'Safari':
            return APPLE_WEBKIT
        return super().engine_info(spec)


class LinuxBuilder(PlatformBuilder):
    os_name = 'Linux'
    browsers = ('Chrome', 'Edge', 'Firefox', 'Opera')

    _ARCH = {'amd64': 'x86_64', 'arm64': 'aarch64', 'ia32': 'i686', 'arm': 'armv7l'}

    def system_info(self, spec) -> str:
        arch = spec['cpu'].get('architecture') or 'amd64'
        return f'(X11; Linux {self._ARCH.get(arch, arch)}{self.firefox_rv(spec)})'


class IOSBuilder(PlatformBuilder):
    """Every iOS browser is a WebKit shell; only the vendor token differs."""

    os_name = 'iOS'
    browsers = ('Safari', 'Chrome', 'Firefox', 'Edge')

    _SHELL_TOKENS = {'Chrome': 'CriOS', 'Firefox': 'FxiOS', 'Edge': 'EdgiOS'}

    def system_info(self, spec) -> str:
        version = (spec['os'].get('version') or DEFAULT_OS_VERSIONS['iOS']).replace('.', '_')
        if spec['device'].get('type') == 'tablet':
            return f'(iPad; CPU OS {version} like Mac OS X)'
        return f'(iPhone; CPU iPhone OS {version} like Mac OS X)'

    def engine_info(self, spec) -> str:
        return APPLE_WEBKIT

    def browser_info(self, spec) -> str:
        browser = spec['browser']
        if browser['name'] == 'Safari':
            return f'Version/{browser["version"]} Mobile/15E148 Safari/604.1'
        shell = self._SHELL_TOKENS[browser['name']]
        return f'{shell}/{browser["version"]} Mobile/15E148 Safari/604.1'


class AndroidBuilder(PlatformBuilder):
    os_name = 'Android'
    browsers = ('Chrome', 'Samsung', 'Firefox', 'Edge', 'Opera')
    edge_token = 'EdgA'

    def mobile(self, spec) -> bool:
        return spec['device'].get('type') != 'tablet'

    def system_info(self, spec) -> str:
        version = spec['os'].get('version') or DEFAULT_OS_VERSIONS['Android']
        if spec['browser']['name'] == 'Firefox':
            form = 'Mobile' if self.mobile(spec) else 'Tablet'
            return f'(Android {version}; {form}; rv:{spec["browser"]["version"]})'
        model = spec['device'].get('model') or ('SM-G991B' if self.mobile(spec) else 'SM-T870')
        return f'(Linux; Android {version}; {model})'

    def engine_info(self, spec) -> str:
        if spec['browser']['name'] == 'Firefox':
            return f'Gecko/{spec["browser"]["version"]}'
        return WEBKIT


BUILDERS: Dict[str, PlatformBuilder] = {
    builder.os_name: builder
    for builder in (WindowsBuilder(), MacBuilder(), LinuxBuilder(), IOSBuilder(), AndroidBuilder())
}


def generate_ua(spec: Optional[UAGenerateSpec] = None) -> str:
    """Render a UA string for ``spec``. Never raises.

    Any failure (unknown OS, browser the OS builder cannot render, malformed
    spec) returns ``DEFAULT_UA``.
    """
    try:
        filled = fill_spec(spec)
        os_name = filled['os'].get('name')
        builder = BUILDERS.get(os_name)
        if builder is None:
            raise UnsupportedPlatformError(str(os_name))
        return builder.build(filled)
    except Exception as exc:
        metrics.record_generate_fallback()
        dev_warning(logger, 'UA generation failed, using default UA: %s', exc)
        return DEFAULT_UA


def supported_combinations() -> List[Tuple[str, str]]:
    """Every (browser, os) pair a builder can render."""
    return [(browser, os_name) for os_name, builder in BUILDERS.items() for browser in builder.browsers]


TEMPLATES: Dict[str, UAGenerateSpec] = {
    'chrome_windows': {
        'browser': {'name': 'Chrome', 'version': '120.0.0.0'},
        'os': {'name': 'Windows', 'version': '10'},
        'cpu': {'architecture': 'amd64'},
    },
    'chrome_mac': {
        'browser': {'name': 'Chrome', 'version': '120.0.0.0'},
        'os': {'name': 'macOS', 'version': '10.15.7'},
        'cpu': {'architecture': 'amd64'},
    },
    'safari_ios': {
        'browser': {'name': 'Safari', 'version': '17.0'},
        'os': {'name': 'iOS', 'version': '17.0'},
        'device': {'type': 'mobile', 'vendor': 'Apple', 'model': 'iPhone'},
    },
    'chrome_android': {
        'browser': {'name': 'Chrome', 'version': '120.0.0.0'},
        'os': {'name': 'Android', 'version': '14'},
        'device': {'type': 'mobile', 'vendor': 'Samsung', 'model': 'SM-G991B'},
    },
    'edge_windows': {
        'browser': {'name': 'Edge', 'version': '120.0.0.0'},
        'os': {'name': 'Windows', 'version': '11'},
        'cpu': {'architecture': 'amd64'},
    },
    'firefox_linux': {
        'browser': {'name': 'Firefox', 'version': '120.0'},
        'os': {'name': 'Linux', 'version': ''},
        'cpu': {'architecture': 'amd64'},
    },
}


def template(name: str) -> str:
    spec = TEMPLATES.get(name)
    if spec is None:
        raise ValidationError(f'Unknown UA template: {name}', details={'available': sorted(TEMPLATES)})
    return generate_ua(spec)
