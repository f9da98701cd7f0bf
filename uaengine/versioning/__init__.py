"""Version Comparison Module.

- comparator.py: Dotted version parsing and total ordering
- ranges.py: ``<browser> <op> <version>`` expressions and satisfaction checks
"""

from .comparator import compare_versions, parse_version, satisfies_operator
from .ranges import (
    canonical_browser,
    compare_ua,
    parse_version_range,
    satisfies,
    satisfies_all,
    satisfies_any,
)

__all__ = [
    'compare_versions', 'parse_version', 'satisfies_operator',
    'canonical_browser', 'compare_ua', 'parse_version_range',
    'satisfies', 'satisfies_all', 'satisfies_any',
]
