"""Dotted-version parsing and total ordering.

Ordering rules:
  - major, minor, patch compared numerically; a missing component counts as 0
  - a present build (4th) component beats an absent one
  - a release beats any prerelease of the same numbers; prereleases compare
    lexically among themselves
"""

import re
from typing import Optional

from ..types import Ordering, ParsedVersion

# numbers first, then an optional non-numeric tail such as -beta.3 or b2
VERSION_PATTERN = re.compile(r'^v?(?P<nums>\d+(?:\.\d+)*)\.?(?:[-+._]?(?P<pre>[A-Za-z][0-9A-Za-z.\-+]*))?$')


def parse_version(version: str) -> ParsedVersion:
    """Parse ``version`` into its canonical components.

    Unparseable input yields a ``ParsedVersion`` whose numeric fields are all
    ``None`` and whose ``prerelease`` carries the original text, so it still
    sorts deterministically (below every release).
    """
    raw = version if isinstance(version, str) else ''
    text = raw.strip()
    match = VERSION_PATTERN.match(text)
    if not match:
        return ParsedVersion(raw=raw, prerelease=text or None)
    nums = [int(n) for n in match.group('nums').split('.')]
    nums += [None] * (4 - len(nums))
    return ParsedVersion(
        raw=raw,
        major=nums[0],
        minor=nums[1],
        patch=nums[2],
        build=nums[3],
        prerelease=match.group('pre'),
    )


def _cmp(a, b) -> Ordering:
    if a < b:
        return Ordering.LESS
    if a > b:
        return Ordering.GREATER
    return Ordering.EQUAL


def _build_key(build: Optional[int]):
    return (0, 0) if build is None else (1, build)


def _prerelease_key(prerelease: Optional[str]):
    # (1, '') for releases sorts above every (0, tag)
    return (1, '') if prerelease is None else (0, prerelease)


def compare_parsed(a: ParsedVersion, b: ParsedVersion) -> Ordering:
    for left, right in ((a.major, b.major), (a.minor, b.minor), (a.patch, b.patch)):
        result = _cmp(left or 0, right or 0)
        if result:
            return result
    result = _cmp(_build_key(a.build), _build_key(b.build))
    if result:
        return result
    return _cmp(_prerelease_key(a.prerelease), _prerelease_key(b.prerelease))


def compare_versions(a: str, b: str) -> Ordering:
    """Compare two version strings.

    Returns:
        Ordering.LESS if a < b, Ordering.EQUAL if equal, Ordering.GREATER if a > b
    """
    if a == b:
        return Ordering.EQUAL
    return compare_parsed(parse_version(a), parse_version(b))


def satisfies_operator(version: str, operator: str, target: str) -> bool:
    comparison = compare_versions(version, target)
    if operator == '>=':
        return comparison >= 0
    if operator == '>':
        return comparison > 0
    if operator == '<=':
        return comparison <= 0
    if operator == '<':
        return comparison < 0
    if operator == '===':
        return comparison == 0
    if operator == '!==':
        return comparison != 0
    return False
