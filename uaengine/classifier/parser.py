"""Rule-cascade UA classifier.

Five independent cascades (browser, engine, os, device, cpu) plus three
flag tests run over the same raw string. The cascades never consult each
other's results, so any one of them can be called on its own.
"""

import logging
import re
from typing import Callable, Dict, List, Optional, Pattern, Tuple

from ..logging_utils import dev_warning, log_suppressed
from ..types import BrowserInfo, CPUInfo, DeviceInfo, DeviceType, EngineInfo, OSInfo, ParsedUA
from . import patterns as P
from .rules import Rule, RuleSet, token
from .validator import EMPTY_VERSION, VersionParts, split_version

logger = logging.getLogger('uaengine.classifier')


def _first_group(pattern: Pattern, ua: str) -> str:
    match = pattern.search(ua)
    if not match:
        return ''
    return next((g for g in match.groups() if g), '')


def _browser(name: str, parts: VersionParts, channel: Optional[str] = None) -> BrowserInfo:
    return BrowserInfo(
        name=name,
        version=parts.version,
        major=parts.major,
        minor=parts.minor,
        patch=parts.patch,
        channel=channel,
    )


def _channel(ua: str, candidates: List[Tuple[str, Pattern]]) -> str:
    for channel, pattern in candidates:
        if pattern.search(ua):
            return channel
    return 'stable'


# ============================================================================
# BROWSER
# ============================================================================

def _extract_edge(ua: str) -> BrowserInfo:
    for pattern, channel in P.EDGE_VERSIONS:
        match = pattern.search(ua)
        if match:
            return _browser('Edge', split_version(match.group(1)), channel)
    return _browser('Edge', EMPTY_VERSION, 'stable')


def _extract_opera(ua: str) -> BrowserInfo:
    raw = _first_group(P.OPERA_VERSION, ua)
    if not raw:
        # Presto-era Opera froze "Opera/9.80" and moved the real version to Version/
        raw = _first_group(P.OPERA_LEGACY_VERSION, ua) or _first_group(P.OPERA_PRESTO_VERSION, ua)
    return _browser('Opera', split_version(raw))


def _extract_ie(ua: str) -> BrowserInfo:
    raw = _first_group(P.IE_VERSION, ua) or _first_group(P.IE_RV_VERSION, ua)
    return _browser('IE', split_version(raw))


def _simple(name: str, pattern: Pattern) -> Callable[[str], BrowserInfo]:
    def _extract(ua: str) -> BrowserInfo:
        return _browser(name, split_version(_first_group(pattern, ua)))
    return _extract


def _with_channel(name: str, pattern: Pattern, channels) -> Callable[[str], BrowserInfo]:
    def _extract(ua: str) -> BrowserInfo:
        return _browser(name, split_version(_first_group(pattern, ua)), _channel(ua, channels))
    return _extract


BROWSER_RULES = RuleSet([
    Rule('Edge', token(P.EDGE_ANY), _extract_edge),
    Rule('Samsung', token(P.SAMSUNG), _simple('Samsung', P.SAMSUNG)),
    Rule('Opera', token(P.OPERA_ANY), _extract_opera),
    Rule('Chrome', token(P.CHROME_ANY, exclude=P.CHROME_EXCLUDE),
         _with_channel('Chrome', P.CHROME_VERSION, P.CHROME_CHANNELS)),
    Rule('Firefox', token(P.FIREFOX_ANY), _with_channel('Firefox', P.FIREFOX_VERSION, P.FIREFOX_CHANNELS)),
    Rule('Safari', token(P.SAFARI_ANY, exclude=P.SAFARI_EXCLUDE), _simple('Safari', P.SAFARI_VERSION)),
    Rule('IE', token(P.IE_ANY), _extract_ie),
    Rule('QQ', token(P.QQ), _simple('QQ', P.QQ)),
    Rule('UC', token(P.UC), _simple('UC', P.UC)),
    Rule('360', token(P.BROWSER_360), lambda ua: _browser('360', EMPTY_VERSION)),
    Rule('Sogou', token(P.SOGOU), _simple('Sogou', P.SOGOU)),
])

# ============================================================================
# ENGINE
# ============================================================================

def _engine(name: str, pattern: Pattern) -> Callable[[str], EngineInfo]:
    def _extract(ua: str) -> EngineInfo:
        return EngineInfo(name=name, version=_first_group(pattern, ua))
    return _extract


ENGINE_RULES = RuleSet([
    Rule('Blink', token(P.BLINK_ANY), _engine('Blink', P.BLINK_VERSION)),
    Rule('WebKit', token(r'WebKit/', exclude=r'Chrome/'), _engine('WebKit', P.WEBKIT_VERSION)),
    Rule('Gecko', lambda ua: bool(P.GECKO_ANY.search(ua) and 'Firefox/' in ua), _engine('Gecko', P.GECKO_VERSION)),
    Rule('Trident', token(r'Trident/'), _engine('Trident', P.TRIDENT_VERSION)),
    Rule('Presto', token(r'Presto/'), _engine('Presto', P.PRESTO_VERSION)),
])

# ============================================================================
# OPERATING SYSTEM
# ============================================================================

def _windows_version(ua: str) -> str:
    nt = _first_group(P.WINDOWS_NT_VERSION, ua)
    if nt == '10.0':
        marker = P.WINDOWS_NT_10.search(ua)
        builds = P.WINDOWS_BUILD.findall(ua[marker.end():]) if marker else []
        if any(int(b) >= P.WINDOWS_11_MIN_BUILD for b in builds):
            return '11'
        return '10'
    return P.WINDOWS_NT_NAMES.get(nt, nt)


def _mac_version(ua: str) -> str:
    version = _first_group(P.MAC_VERSION, ua).replace('_', '.').strip('.')
    if version.startswith('10.16'):
        # Big Sur shipped as 10.16 in compatibility mode
        return '11.0'
    return version


def _linux(ua: str) -> OSInfo:
    if 'Ubuntu' in ua:
        return OSInfo('Ubuntu', _first_group(P.UBUNTU_VERSION, ua))
    if 'CentOS' in ua:
        return OSInfo('CentOS', '')
    return OSInfo('Linux', '')


OS_RULES = RuleSet([
    Rule('iOS', token(P.IOS_ANY), lambda ua: OSInfo('iOS', _first_group(P.IOS_VERSION, ua).replace('_', '.'))),
    Rule('HarmonyOS', token(r'HarmonyOS'), lambda ua: OSInfo('HarmonyOS', _first_group(P.HARMONY_VERSION, ua))),
    Rule('Android', token(r'Android'), lambda ua: OSInfo('Android', _first_group(P.ANDROID_VERSION, ua))),
    Rule('Windows', token(r'Windows'), lambda ua: OSInfo('Windows', _windows_version(ua))),
    Rule('macOS', token(P.MAC_ANY), lambda ua: OSInfo('macOS', _mac_version(ua))),
    Rule('Linux', token(r'Linux', exclude=r'Android|HarmonyOS'), _linux),
    Rule('Chrome OS', token(r'CrOS'), lambda ua: OSInfo('Chrome OS', _first_group(P.CHROMEOS_VERSION, ua))),
    Rule('FreeBSD', token(r'FreeBSD'), lambda ua: OSInfo('FreeBSD', _first_group(P.FREEBSD_VERSION, ua))),
])

# ============================================================================
# DEVICE
# ============================================================================

ModelFn = Callable[[str], Optional[str]]


def _fixed(model: str) -> ModelFn:
    return lambda ua: model


def _matched(pattern: str, group: int = 0, default: Optional[str] = None) -> ModelFn:
    regex = re.compile(pattern)

    def _extract(ua: str) -> Optional[str]:
        match = regex.search(ua)
        if match and match.group(group):
            return match.group(group)
        return default
    return _extract


def _ipad_model(ua: str) -> str:
    for variant in ('Pro', 'Air', 'Mini'):
        if re.search(r'iPad.*' + variant, ua):
            return f'iPad {variant}'
    return 'iPad'


def _iphone_model(ua: str) -> str:
    hardware = re.search(r'iPhone(\d+,\d+)', ua)
    return f'iPhone {hardware.group(1)}' if hardware else 'iPhone'


# Applied only once the device type is fixed: (trigger, vendor, model)
VENDOR_RULES: Dict[DeviceType, List[Tuple[Pattern, str, ModelFn]]] = {
    DeviceType.TV: [
        (re.compile(r'AppleTV'), 'Apple', _fixed('Apple TV')),
        (re.compile(r'GoogleTV'), 'Google', _fixed('Google TV')),
        (re.compile(r'WebOS'), 'LG', _fixed('WebOS TV')),
        (re.compile(r'Tizen.*TV'), 'Samsung', _fixed('Tizen TV')),
    ],
    DeviceType.WEARABLE: [
        (re.compile(r'Apple.*Watch'), 'Apple', _fixed('Apple Watch')),
        (re.compile(r'WearOS'), 'Google', _fixed('Wear OS')),
    ],
    DeviceType.TABLET: [
        (re.compile(r'iPad'), 'Apple', _ipad_model),
        (re.compile(r'SM-T'), 'Samsung', _matched(r'SM-T[\w]+')),
        (re.compile(r'Pixel.*Tablet'), 'Google', _fixed('Pixel Tablet')),
    ],
    DeviceType.MOBILE: [
        (re.compile(r'iPhone'), 'Apple', _iphone_model),
        (re.compile(r'iPod'), 'Apple', _fixed('iPod')),
        (re.compile(r'SM-'), 'Samsung', _matched(r'SM-[\w]+')),
        (re.compile(r'Pixel'), 'Google', _matched(r'Pixel( \d+)?( Pro| XL)?', default='Pixel')),
        (re.compile(r'MI\s|Redmi'), 'Xiaomi', _matched(r'(MI \w+|Redmi \w+)')),
        (re.compile(r'HUAWEI|Honor'), 'Huawei', _matched(r'(HUAWEI [\w-]+|Honor [\w-]+)')),
        (re.compile(r'OPPO'), 'OPPO', _matched(r'OPPO ([\w-]+)', group=1)),
        (re.compile(r'vivo'), 'Vivo', _matched(r'vivo ([\w-]+)', group=1)),
        (re.compile(r'OnePlus'), 'OnePlus', _matched(r'OnePlus ([\w-]+)', group=1)),
    ],
}


def _device(device_type: DeviceType) -> Callable[[str], DeviceInfo]:
    def _extract(ua: str) -> DeviceInfo:
        for trigger, vendor, model in VENDOR_RULES.get(device_type, []):
            if trigger.search(ua):
                return DeviceInfo(device_type, vendor, model(ua) or None)
        return DeviceInfo(device_type)
    return _extract


def _is_tablet(ua: str) -> bool:
    if P.TABLET_IPAD.search(ua):
        return True
    return 'Android' in ua and 'Mobile' not in ua and 'TV' not in ua


DEVICE_RULES = RuleSet([
    Rule('tv', token(P.TV_ANY), _device(DeviceType.TV)),
    Rule('wearable', token(P.WEARABLE_ANY), _device(DeviceType.WEARABLE)),
    Rule('tablet', _is_tablet, _device(DeviceType.TABLET)),
    Rule('mobile', token(P.MOBILE_ANY), _device(DeviceType.MOBILE)),
])

# ============================================================================
# CPU + FLAGS
# ============================================================================

def parse_cpu(ua: str) -> CPUInfo:
    for architecture, pattern in P.CPU_PATTERNS:
        if pattern.search(ua):
            return CPUInfo(architecture)
    return CPUInfo('unknown')


def is_bot(ua: str) -> bool:
    if not ua or not isinstance(ua, str):
        return False
    return any(pattern.search(ua) for _, pattern in P.BOT_PATTERNS)


def is_webview(ua: str) -> bool:
    if not ua or not isinstance(ua, str):
        return False
    if any(pattern.search(ua) for _, pattern in P.WEBVIEW_PATTERNS):
        return True
    return bool(P.ANDROID_WEBVIEW.search(ua) and not P.REDUCED_CHROME.search(ua))


def is_headless(ua: str) -> bool:
    if not ua or not isinstance(ua, str):
        return False
    return any(pattern.search(ua) for _, pattern in P.HEADLESS_PATTERNS)


# ============================================================================
# CLASSIFIER
# ============================================================================

def unknown_result(source: str = '') -> ParsedUA:
    """Canonical result for empty, non-string or unparseable input."""
    return ParsedUA(source=source)


class Classifier:
    """Holds one copy of each rule cascade.

    Instances are independent: inserting a vendor rule into
    ``classifier.browser_rules`` does not affect other classifiers or the
    module-level defaults.
    """

    def __init__(self):
        self.browser_rules = BROWSER_RULES.copy()
        self.engine_rules = ENGINE_RULES.copy()
        self.os_rules = OS_RULES.copy()
        self.device_rules = DEVICE_RULES.copy()

    def parse_browser(self, ua: str) -> BrowserInfo:
        return self.browser_rules.evaluate(ua, BrowserInfo())

    def parse_engine(self, ua: str) -> EngineInfo:
        return self.engine_rules.evaluate(ua, EngineInfo())

    def parse_os(self, ua: str) -> OSInfo:
        return self.os_rules.evaluate(ua, OSInfo())

    def parse_device(self, ua: str) -> DeviceInfo:
        return self.device_rules.evaluate(ua, DeviceInfo())

    def classify(self, raw) -> ParsedUA:
        """Map ``raw`` to a complete ``ParsedUA``. Never raises."""
        if not isinstance(raw, str):
            if raw is not None:
                dev_warning(logger, 'Non-string UA input of type %s', type(raw).__name__)
            return unknown_result('')
        ua = raw.strip()
        if not ua:
            return unknown_result(raw)
        try:
            return ParsedUA(
                browser=self.parse_browser(ua),
                engine=self.parse_engine(ua),
                os=self.parse_os(ua),
                device=self.parse_device(ua),
                cpu=parse_cpu(ua),
                is_bot=is_bot(ua),
                is_webview=is_webview(ua),
                is_headless=is_headless(ua),
                source=raw,
            )
        except Exception as exc:
            # extractors can be user-inserted rules; classification stays total
            log_suppressed(logger, exc, 'classify', level=logging.WARNING)
            return unknown_result(raw)


DEFAULT_CLASSIFIER = Classifier()


def parse_ua(raw) -> ParsedUA:
    """Classify ``raw`` with the default rule cascades (no cache, no plugins)."""
    return DEFAULT_CLASSIFIER.classify(raw)


def parse_browser(ua: str) -> BrowserInfo:
    return DEFAULT_CLASSIFIER.parse_browser(ua or '')


def parse_engine(ua: str) -> EngineInfo:
    return DEFAULT_CLASSIFIER.parse_engine(ua or '')


def parse_os(ua: str) -> OSInfo:
    return DEFAULT_CLASSIFIER.parse_os(ua or '')


def parse_device(ua: str) -> DeviceInfo:
    return DEFAULT_CLASSIFIER.parse_device(ua or '')
