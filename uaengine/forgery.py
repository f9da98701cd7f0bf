"""Heuristic scoring of implausible User-Agent strings.

Each signal adds a fixed weight; the capped sum is the confidence and a
confidence above ``FAKE_THRESHOLD`` marks the string as fake.
"""

import re
from typing import List, Tuple

from .types import FakeUAReport

MAX_CONFIDENCE = 100
FAKE_THRESHOLD = 50

CHROME_MAJOR = re.compile(r'Chrome/(\d+)')
SAFARI_VERSION = re.compile(r'Safari/([\d.]+)')
IOS_DEVICE = re.compile(r'iPhone|iPad|iPod')
IOS_ENGINE_TOKENS = re.compile(r'Safari/|CriOS/|FxiOS/')
WINDOWS_XP = re.compile(r'Windows NT 5\.[12]')

# Chrome/ and Safari/ routinely travel together with one vendor token
BROWSER_TOKENS: List[Tuple[str, re.Pattern]] = [
    ('chrome', re.compile(r'Chrome/')),
    ('firefox', re.compile(r'Firefox/')),
    ('safari', re.compile(r'Safari/')),
    ('edge', re.compile(r'Edg(?:e|A|iOS|Dev)?/')),
    ('opera', re.compile(r'OPR/|Opera/')),
    ('samsung', re.compile(r'SamsungBrowser/')),
    ('ie', re.compile(r'MSIE |Trident/')),
    ('crios', re.compile(r'CriOS/')),
    ('fxios', re.compile(r'FxiOS/')),
]

CHROME_SAFARI_VERSION = '537.36'
MIN_LENGTH = 50
MAX_LENGTH = 500


def _chrome_major(ua: str):
    match = CHROME_MAJOR.search(ua)
    return int(match.group(1)) if match else None


def detect_fake_ua(ua: str) -> FakeUAReport:
    """Score ``ua`` for forgery signals.

    Weights:
        +30  Chrome >= 28 whose Safari/ token is missing or not 537.36
        +40  iOS device with no Safari/, CriOS/ or FxiOS/ token
        +50  Chrome >= 50 on Windows XP (NT 5.1 / 5.2)
        +40  Chrome/ token without AppleWebKit/
        +20  more than 3 distinct browser tokens
        +10  missing Mozilla/5.0 prefix
        +20  shorter than 50 characters, or +10 longer than 500
    """
    if not isinstance(ua, str):
        ua = ''
    score = 0
    reasons: List[str] = []

    chrome_major = _chrome_major(ua)
    if chrome_major is not None and chrome_major >= 28:
        safari = SAFARI_VERSION.search(ua)
        if not safari or safari.group(1) != CHROME_SAFARI_VERSION:
            score += 30
            reasons.append('Chrome version does not match its Safari/ token')

    if IOS_DEVICE.search(ua) and not IOS_ENGINE_TOKENS.search(ua):
        score += 40
        reasons.append('iOS device without a Safari, CriOS or FxiOS token')

    if chrome_major is not None and chrome_major >= 50 and WINDOWS_XP.search(ua):
        score += 50
        reasons.append('Modern Chrome claims to run on Windows XP')

    if 'Chrome/' in ua and 'AppleWebKit/' not in ua:
        score += 40
        reasons.append('Chrome token without AppleWebKit')

    tokens = [name for name, pattern in BROWSER_TOKENS if pattern.search(ua)]
    if len(tokens) > 3:
        score += 20
        reasons.append(f'Too many browser tokens: {", ".join(tokens)}')

    if not ua.startswith('Mozilla/5.0'):
        score += 10
        reasons.append('Missing Mozilla/5.0 prefix')

    if len(ua) < MIN_LENGTH:
        score += 20
        reasons.append(f'Unusually short ({len(ua)} chars)')
    elif len(ua) > MAX_LENGTH:
        score += 10
        reasons.append(f'Unusually long ({len(ua)} chars)')

    confidence = min(score, MAX_CONFIDENCE)
    return FakeUAReport(is_fake=confidence > FAKE_THRESHOLD, confidence=confidence, reasons=reasons)
