"""Range expressions: ``<browser> <op> <version>``.

    "Chrome >= 100"      "firefox!=115"      '"Internet Explorer" < 11'

``==`` and ``!=`` are accepted as spellings of ``===`` and ``!==``. A
malformed expression parses to ``None`` and never satisfies anything.

``===``/``!==`` against a bare major (``Chrome === 124``) compare majors
only. Every other comparison uses ``compare_versions``, where a present
component beats an absent one: ``Chrome/124.0.0.0`` satisfies
``Chrome > 124`` and fails ``Chrome <= 124``. Write ``Chrome < 125`` to mean
"any 124 release".
"""

import logging
import re
from typing import Iterable, Optional, Union

from .. import metrics
from ..classifier.parser import parse_ua
from ..exceptions import IncomparableBrowsersError
from ..logging_utils import dev_warning
from ..types import Ordering, ParsedUA, VersionRange
from .comparator import compare_versions, satisfies_operator

logger = logging.getLogger('uaengine.versioning')

RANGE_PATTERN = re.compile(
    r'''^\s*
    (?P<browser>"[^"]+"|'[^']+'|\w[\w ]*?)
    \s*(?P<op>===|!==|==|!=|>=|<=|>|<)\s*
    (?P<version>\d+(?:\.\d+)*(?:[-+.]?[A-Za-z][0-9A-Za-z.\-]*)?)
    \s*$''',
    re.X,
)

OPERATOR_SPELLINGS = {'==': '===', '!=': '!=='}

BARE_MAJOR = re.compile(r'^\d+$')

# lower-cased spelling -> canonical family
BROWSER_ALIASES = {
    'chrome': 'chrome',
    'chromium': 'chrome',
    'google chrome': 'chrome',
    'headlesschrome': 'chrome',
    'crios': 'chrome',
    'edge': 'edge',
    'msedge': 'edge',
    'microsoft edge': 'edge',
    'edg': 'edge',
    'firefox': 'firefox',
    'ff': 'firefox',
    'mozilla firefox': 'firefox',
    'fxios': 'firefox',
    'safari': 'safari',
    'mobile safari': 'safari',
    'opera': 'opera',
    'opr': 'opera',
    'samsung': 'samsung',
    'samsung internet': 'samsung',
    'samsungbrowser': 'samsung',
    'ie': 'ie',
    'msie': 'ie',
    'internet explorer': 'ie',
    'qq': 'qq',
    'qqbrowser': 'qq',
    'uc': 'uc',
    'ucbrowser': 'uc',
    '360': '360',
    'sogou': 'sogou',
}

UAInput = Union[ParsedUA, str]


def canonical_browser(name: str) -> str:
    key = ' '.join((name or '').strip().strip('"\'').lower().split())
    return BROWSER_ALIASES.get(key, key)


def same_family(a: str, b: str) -> bool:
    return canonical_browser(a) == canonical_browser(b)


def parse_version_range(expr: str) -> Optional[VersionRange]:
    if not isinstance(expr, str):
        return None
    match = RANGE_PATTERN.match(expr)
    if not match:
        return None
    browser = match.group('browser').strip().strip('"\'').strip()
    if not browser:
        return None
    operator = OPERATOR_SPELLINGS.get(match.group('op'), match.group('op'))
    return VersionRange(browser_name=browser, operator=operator, target_version=match.group('version'))


def resolve(ua: UAInput) -> ParsedUA:
    if isinstance(ua, ParsedUA):
        return ua
    return parse_ua(ua)


def _satisfies_range(parsed: ParsedUA, version_range: VersionRange) -> bool:
    if not same_family(parsed.browser.name, version_range.browser_name):
        return False
    if parsed.browser.major is None:
        return False
    target = version_range.target_version
    if version_range.operator in ('===', '!==') and BARE_MAJOR.match(target):
        equal = parsed.browser.major == int(target)
        return equal if version_range.operator == '===' else not equal
    return satisfies_operator(parsed.browser.version, version_range.operator, target)


def _satisfies_one(parsed: ParsedUA, expr: str) -> bool:
    version_range = parse_version_range(expr)
    if version_range is None:
        metrics.record_invalid_range()
        dev_warning(logger, 'Invalid version range format: %r', expr)
        return False
    return _satisfies_range(parsed, version_range)


def satisfies(ua: UAInput, range_expr: Union[str, Iterable[str]]) -> bool:
    """True when ``ua`` matches the range expression.

    A list of expressions is OR-combined, same as ``satisfies_any``.
    """
    if not isinstance(range_expr, str):
        return satisfies_any(ua, range_expr)
    return _satisfies_one(resolve(ua), range_expr)


def satisfies_all(ua: UAInput, ranges: Iterable[str]) -> bool:
    parsed = resolve(ua)
    return all(_satisfies_one(parsed, expr) for expr in ranges)


def satisfies_any(ua: UAInput, ranges: Iterable[str]) -> bool:
    parsed = resolve(ua)
    return any(_satisfies_one(parsed, expr) for expr in ranges)


def compare_ua(a: UAInput, b: UAInput) -> Ordering:
    """Order two UAs of the same browser family by version.

    Raises:
        IncomparableBrowsersError: the families differ.
    """
    left, right = resolve(a), resolve(b)
    if not same_family(left.browser.name, right.browser.name):
        raise IncomparableBrowsersError(left.browser.name, right.browser.name)
    return compare_versions(left.browser.version, right.browser.version)
