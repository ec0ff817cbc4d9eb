"""
Rewrite rules and the leading-character index used to match them.

A ``Rule`` rewrites ``pattern`` into a phoneme expression when the text
before the cursor matches ``left_context`` and the text after the pattern
matches ``right_context``.  Contexts are regular expressions: the left one
is anchored at the cursor, the right one at the end of the pattern.

Usage:
    from bmpm.rules import Rule, RuleTable

    table = RuleTable([
        Rule("s", Phoneme("s")),
        Rule("sch", Phoneme("S"), right_context="[aeiou]"),
    ], name="gen_rules_german")
    rule = table.match("schulz", 0)    # the "sch" rule
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from typing import Iterable, Iterator

from bmpm.languages import NO_LANGUAGES, LanguageSet
from bmpm.phoneme import PhonemeExpr


def compile_left_context(context: str) -> re.Pattern | None:
    """Compile a left context so it must match right up to the cursor."""
    if not context:
        return None
    return re.compile(f"(?:{context})\\Z")


def compile_right_context(context: str) -> re.Pattern | None:
    """Compile a right context so it must match right after the pattern."""
    if not context:
        return None
    return re.compile(context)


@dataclass(frozen=True, slots=True)
class Rule:
    """One rewrite directive.  Immutable once built."""

    pattern: str
    phonetic: PhonemeExpr
    left_context: str = ""
    right_context: str = ""
    index: int = 0
    location: str | None = None  # "file:line" when loaded from a corpus

    _left: re.Pattern | None = field(init=False, repr=False, compare=False)
    _right: re.Pattern | None = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.pattern:
            raise ValueError("Rule pattern must not be empty")
        object.__setattr__(self, "_left", compile_left_context(self.left_context))
        object.__setattr__(self, "_right", compile_right_context(self.right_context))

    @property
    def languages(self) -> LanguageSet:
        """Union of the languages of every phonetic alternative."""
        result = NO_LANGUAGES
        for phoneme in self.phonetic.phonemes():
            result = result.merge(phoneme.languages)
        return result

    def matches(self, text: str, position: int) -> bool:
        """True if pattern and both contexts match with the cursor at ``position``."""
        if not text.startswith(self.pattern, position):
            return False
        end = position + len(self.pattern)
        if self._right is not None and self._right.match(text, end) is None:
            return False
        if self._left is not None and self._left.search(text[:position]) is None:
            return False
        return True

    def __str__(self) -> str:
        where = f" ({self.location})" if self.location else ""
        return (
            f'"{self.pattern}" "{self.left_context}" "{self.right_context}" '
            f'"{self.phonetic}"{where}'
        )


class RuleTable:
    """Rules indexed by the first character of their pattern.

    Declaration order is stamped onto each rule as ``index`` and used to
    break ties between equally long matches.  The table is never mutated
    after construction, so one instance can be shared between threads.
    """

    def __init__(self, rules: Iterable[Rule] = (), name: str = ""):
        self.name = name
        self.rules: tuple[Rule, ...] = tuple(
            rule if rule.index == i else replace(rule, index=i)
            for i, rule in enumerate(rules)
        )
        self._index: dict[str, list[Rule]] = {}
        for rule in self.rules:
            self._index.setdefault(rule.pattern[0], []).append(rule)

    def candidates(self, char: str) -> list[Rule]:
        return self._index.get(char, [])

    def match(self, text: str, position: int) -> Rule | None:
        """Return the best rule applicable at ``position``, or None.

        The longest matching pattern wins; among equally long patterns the
        first declared wins.
        """
        if not 0 <= position < len(text):
            return None
        best: Rule | None = None
        for rule in self.candidates(text[position]):
            if best is not None and len(rule.pattern) <= len(best.pattern):
                continue
            if rule.matches(text, position):
                best = rule
        return best

    def __len__(self) -> int:
        return len(self.rules)

    def __iter__(self) -> Iterator[Rule]:
        return iter(self.rules)

    def __repr__(self) -> str:
        return f"RuleTable({self.name!r}, {len(self.rules)} rules)"

