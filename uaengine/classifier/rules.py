"""Ordered detection rules.

Each detection dimension (browser, engine, os, device) is a ``RuleSet``: an
ordered list of ``Rule(name, predicate, extract)`` records evaluated top to
bottom, first match wins. Many vendor tokens are substrings of each other
(every Edge UA also carries ``Chrome/``), so position in the list *is* the
disambiguation logic. Keeping it as data makes precedence inspectable from
tests and lets callers slot a vendor rule in at a given priority.
"""

import re
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Iterator, List, Optional, Pattern, Union

Predicate = Callable[[str], bool]
Extractor = Callable[[str], Any]


def token(pattern: Union[str, Pattern], exclude: Union[str, Pattern, None] = None) -> Predicate:
    """Build a predicate: ``pattern`` present and ``exclude`` absent."""
    include_re = re.compile(pattern) if isinstance(pattern, str) else pattern
    exclude_re = re.compile(exclude) if isinstance(exclude, str) else exclude

    def _test(ua: str) -> bool:
        if not include_re.search(ua):
            return False
        return not (exclude_re is not None and exclude_re.search(ua))

    return _test


@dataclass(frozen=True)
class Rule:
    name: str
    predicate: Predicate
    extract: Extractor

    def matches(self, ua: str) -> bool:
        return bool(self.predicate(ua))


class RuleSet:
    """Ordered, copyable collection of rules with positional insertion."""

    def __init__(self, rules: Iterable[Rule] = ()):
        self._rules: List[Rule] = list(rules)

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def names(self) -> List[str]:
        return [r.name for r in self._rules]

    def index(self, name: str) -> int:
        for i, rule in enumerate(self._rules):
            if rule.name == name:
                return i
        raise KeyError(name)

    def insert(self, rule: Rule, *, before: Optional[str] = None, after: Optional[str] = None) -> None:
        """Insert ``rule`` before/after the named rule, or append."""
        if before is not None and after is not None:
            raise ValueError('pass either before= or after=, not both')
        if before is not None:
            self._rules.insert(self.index(before), rule)
        elif after is not None:
            self._rules.insert(self.index(after) + 1, rule)
        else:
            self._rules.append(rule)

    def remove(self, name: str) -> Rule:
        return self._rules.pop(self.index(name))

    def first_match(self, ua: str) -> Optional[Rule]:
        for rule in self._rules:
            if rule.matches(ua):
                return rule
        return None

    def evaluate(self, ua: str, default: Any = None) -> Any:
        """Run the extractor of the first matching rule."""
        rule = self.first_match(ua)
        if rule is None:
            return default
        return rule.extract(ua)

    def copy(self) -> 'RuleSet':
        return RuleSet(self._rules)
