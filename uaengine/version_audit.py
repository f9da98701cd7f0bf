"""Browser capability and release-age checks.

``is_modern`` ANDs a base minimum-version table with optional feature
tables. ``is_outdated`` estimates how old a release is from a per-family
major -> (year, month) table. ``get_security_level`` folds both together
with the bot/headless flags into a four-tier rating.
"""

import datetime as _dt
import re
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from .types import ModernBrowserOptions, ParsedUA, SecurityLevel
from .versioning.ranges import UAInput, resolve

# Minimums are (major, minor). Only Safari carries a meaningful minor,
# compared as a decimal number the way its marketing versions read.
LEADING_DECIMAL = re.compile(r'\d+(?:\.\d+)?')
MinVersion = Tuple[int, int]

MODERN_VERSIONS: Dict[str, MinVersion] = {
    'Chrome': (80, 0),
    'Edge': (80, 0),
    'Firefox': (72, 0),
    'Safari': (13, 1),
    'Opera': (67, 0),
    'Samsung': (12, 0),
}

FEATURE_VERSIONS: Dict[str, Dict[str, MinVersion]] = {
    'es2020': {
        'Chrome': (80, 0),
        'Edge': (80, 0),
        'Firefox': (72, 0),
        'Safari': (13, 1),
        'Opera': (67, 0),
        'Samsung': (13, 0),
    },
    'webgl2': {
        'Chrome': (56, 0),
        'Edge': (79, 0),
        'Firefox': (51, 0),
        'Safari': (15, 0),
        'Opera': (43, 0),
        'Samsung': (6, 0),
    },
    'webassembly': {
        'Chrome': (57, 0),
        'Edge': (16, 0),
        'Firefox': (52, 0),
        'Safari': (11, 0),
        'Opera': (44, 0),
        'Samsung': (7, 0),
    },
    'service_worker': {
        'Chrome': (40, 0),
        'Edge': (17, 0),
        'Firefox': (44, 0),
        'Safari': (11, 1),
        'Opera': (27, 0),
        'Samsung': (4, 0),
    },
}

# Sparse: a major between two entries takes the date of the lower one.
RELEASE_DATES: Dict[str, Dict[int, Tuple[int, int]]] = {
    'Chrome': {
        50: (2016, 4), 60: (2017, 7), 70: (2018, 10), 80: (2020, 2), 90: (2021, 4),
        100: (2022, 3), 110: (2023, 2), 120: (2023, 12), 125: (2024, 5), 130: (2024, 10),
        135: (2025, 4), 140: (2025, 9),
    },
    'Edge': {
        12: (2015, 7), 18: (2018, 11), 79: (2020, 1), 90: (2021, 4), 100: (2022, 4),
        110: (2023, 2), 120: (2023, 12), 130: (2024, 10), 140: (2025, 10),
    },
    'Firefox': {
        60: (2018, 5), 72: (2020, 1), 78: (2020, 6), 91: (2021, 8), 100: (2022, 5),
        115: (2023, 7), 120: (2023, 11), 128: (2024, 7), 133: (2025, 2), 140: (2025, 6),
        145: (2025, 11),
    },
    'Safari': {
        11: (2017, 9), 12: (2018, 9), 13: (2019, 9), 14: (2020, 9), 15: (2021, 9),
        16: (2022, 9), 17: (2023, 9), 18: (2024, 9), 26: (2025, 9),
    },
    'Opera': {
        60: (2019, 4), 67: (2020, 3), 80: (2021, 9), 90: (2022, 8), 100: (2023, 6),
        106: (2024, 1), 110: (2024, 5), 115: (2024, 12), 120: (2025, 6),
    },
    'Samsung': {
        10: (2019, 8), 12: (2020, 6), 14: (2021, 4), 16: (2021, 11), 18: (2022, 8),
        20: (2023, 2), 23: (2023, 11), 25: (2024, 5), 27: (2024, 11), 28: (2025, 4),
    },
    'IE': {
        6: (2001, 8), 7: (2006, 10), 8: (2009, 3), 9: (2011, 3), 10: (2012, 10), 11: (2013, 10),
    },
}

# number of risk signals -> level
_SECURITY_TIERS = (SecurityLevel.HIGH, SecurityLevel.MEDIUM, SecurityLevel.LOW, SecurityLevel.CRITICAL)

OptionsInput = Union[ModernBrowserOptions, Mapping[str, Any], None]


def _options(opts: OptionsInput) -> ModernBrowserOptions:
    if opts is None:
        return ModernBrowserOptions()
    if isinstance(opts, ModernBrowserOptions):
        return opts
    # tolerate the camelCase key used by JSON clients
    data = dict(opts)
    if 'serviceWorker' in data:
        data.setdefault('service_worker', data.pop('serviceWorker'))
    known = {k: bool(v) for k, v in data.items() if k in ModernBrowserOptions.__dataclass_fields__}
    return ModernBrowserOptions(**known)


def _fractional(version: str) -> Optional[float]:
    match = LEADING_DECIMAL.match(version or '')
    return float(match.group(0)) if match else None


def _meets(parsed: ParsedUA, minimum: MinVersion) -> bool:
    browser = parsed.browser
    if browser.name == 'Safari':
        # 13.1 is a real threshold for Safari; '13.1.2' reads as 13.1, '13.05' as 13.05
        fractional = _fractional(browser.version)
        if fractional is not None:
            return fractional >= float(f'{minimum[0]}.{minimum[1]}')
    return browser.major >= minimum[0]


def is_modern(ua: UAInput, opts: OptionsInput = None) -> bool:
    """True when the browser clears the base table and every enabled feature table.

    Browsers missing from the base table, or without a major version, are
    never modern. A browser missing from a feature table is not held back by
    that table.
    """
    parsed = resolve(ua)
    options = _options(opts)
    minimum = MODERN_VERSIONS.get(parsed.browser.name)
    if minimum is None or parsed.browser.major is None:
        return False
    if not _meets(parsed, minimum):
        return False
    for feature, table in FEATURE_VERSIONS.items():
        if not getattr(options, feature):
            continue
        required = table.get(parsed.browser.name)
        if required and not _meets(parsed, required):
            return False
    return True


def release_date(browser: str, major: Optional[int]) -> Optional[Tuple[int, int]]:
    """Best-known (year, month) of ``browser`` ``major``.

    A major between two entries takes the date of the lower one. Majors
    outside the table, or browsers with no table, give ``None``.
    """
    table = RELEASE_DATES.get(browser)
    if not table or major is None or major > max(table):
        return None
    known = [m for m in table if m <= major]
    if not known:
        return None
    return table[max(known)]


def _months_between(then: Tuple[int, int], now: _dt.date) -> int:
    return (now.year - then[0]) * 12 + (now.month - then[1])


def is_outdated(ua: UAInput, months_threshold: int = 24, now: Optional[_dt.date] = None) -> bool:
    """True when the browser release is older than ``months_threshold`` months.

    Unknown browsers and unknown majors, including majors newer than the
    release table, are treated as outdated.
    """
    parsed = resolve(ua)
    released = release_date(parsed.browser.name, parsed.browser.major)
    if released is None:
        return True
    today = now or _dt.date.today()
    return _months_between(released, today) > months_threshold


def get_security_level(ua: UAInput, now: Optional[_dt.date] = None) -> SecurityLevel:
    parsed = resolve(ua)
    risk = 0
    if parsed.is_bot or parsed.is_headless:
        risk += 1
    if not is_modern(parsed):
        risk += 1
    if is_outdated(parsed, now=now):
        risk += 1
    return _SECURITY_TIERS[risk]
