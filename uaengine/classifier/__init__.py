"""UA Classification Module.

Maps a raw User-Agent string to a frozen ``ParsedUA`` through ordered rule
cascades, one per detection dimension.

Architecture:
- rules.py: Rule / RuleSet records (priority is list order)
- patterns.py: Token regexes, Windows NT table, flag signature lists
- validator.py: Version string normalization
- parser.py: The cascades and the Classifier that runs them
"""

from .parser import (
    Classifier,
    DEFAULT_CLASSIFIER,
    is_bot,
    is_headless,
    is_webview,
    parse_browser,
    parse_cpu,
    parse_device,
    parse_engine,
    parse_os,
    parse_ua,
)
from .rules import Rule, RuleSet, token

__all__ = [
    'Classifier', 'DEFAULT_CLASSIFIER', 'parse_ua',
    'parse_browser', 'parse_engine', 'parse_os', 'parse_device', 'parse_cpu',
    'is_bot', 'is_webview', 'is_headless',
    'Rule', 'RuleSet', 'token',
]
