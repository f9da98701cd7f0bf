"""Version string normalization for classifier output.

Turns the raw text captured after a vendor token into a clean dotted
version plus integer components.
"""

import logging
import re
from typing import NamedTuple, Optional

from ..logging_utils import dev_warning

logger = logging.getLogger('uaengine.classifier')

_PARENTHETICAL = re.compile(r'\s*\(.*?\)\s*')
_NON_VERSION_CHARS = re.compile(r'[^\d.]')
_REPEATED_DOTS = re.compile(r'\.+')


class VersionParts(NamedTuple):
    version: str
    major: Optional[int]
    minor: Optional[int]
    patch: Optional[int]


EMPTY_VERSION = VersionParts('', None, None, None)


def normalize_version(version: str) -> str:
    """Clean a captured version token.

    Examples:
        "124.0.6367.60 (Official Build)" -> "124.0.6367.60"
        "..17..0." -> "17.0"
    """
    if not version or not isinstance(version, str):
        return ''
    version = _PARENTHETICAL.sub('', version)
    version = _NON_VERSION_CHARS.sub('', version)
    version = _REPEATED_DOTS.sub('.', version)
    return version.strip('.')


def _component(parts, index: int) -> Optional[int]:
    if index < len(parts) and parts[index]:
        return int(parts[index])
    return None


def split_version(raw: str) -> VersionParts:
    """Normalize ``raw`` and split it into major/minor/patch.

    Absent components are ``None``, never 0.
    """
    clean = normalize_version(raw)
    if not clean:
        if raw:
            dev_warning(logger, 'Failed to parse version: %r', raw)
        return EMPTY_VERSION
    parts = clean.split('.')
    return VersionParts(clean, _component(parts, 0), _component(parts, 1), _component(parts, 2))
