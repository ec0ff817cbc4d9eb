"""
Guess which languages a word may belong to.

The guesser walks a word the same way the engine walks it with a rule
table, but its rules produce no phonetic output.  Each matching rule
votes for the languages it names; every language with at least one vote
survives.

Usage:
    from bmpm.guesser import LanguageGuesser, LanguageRule

    guesser = LanguageGuesser([
        LanguageRule("sch", LanguageSet.of("german")),
        LanguageRule("w", LanguageSet.of("polish", "german")),
    ])
    guesser.guess("schwarz")   # -> german+polish
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable

from bmpm.languages import ANY_LANGUAGE, LanguageSet
from bmpm.phoneme import Phoneme
from bmpm.rules import Rule, RuleTable


@dataclass(frozen=True, slots=True)
class LanguageRule:
    """A pattern with contexts that is evidence for some languages."""

    pattern: str
    languages: LanguageSet
    left_context: str = ""
    right_context: str = ""
    location: str | None = None

    _rule: Rule = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.languages.is_empty() or self.languages.is_any:
            raise ValueError(
                f"Language rule {self.pattern!r} must name at least one language"
            )
        # Reuse rule matching; the phonetic carries the vote.
        rule = Rule(
            self.pattern,
            Phoneme(self.pattern, self.languages),
            left_context=self.left_context,
            right_context=self.right_context,
            location=self.location,
        )
        object.__setattr__(self, "_rule", rule)


class LanguageGuesser:
    """Narrows a word to the languages its spelling gives evidence for."""

    def __init__(self, rules: Iterable[LanguageRule] = (), name: str = ""):
        self.rules: tuple[LanguageRule, ...] = tuple(rules)
        self.table = RuleTable((r._rule for r in self.rules), name=name)

    @property
    def name(self) -> str:
        return self.table.name

    def votes(self, word: str) -> Counter[str]:
        """Count the votes each language receives for ``word``."""
        word = word.lower()
        counts: Counter[str] = Counter()
        i = 0
        while i < len(word):
            rule = self.table.match(word, i)
            if rule is None:
                i += 1
                continue
            for language in rule.languages:
                counts[language] += 1
            i += len(rule.pattern)
        return counts

    def guess(self, word: str, restriction: LanguageSet = ANY_LANGUAGE) -> LanguageSet:
        """Return the plausible languages for ``word``, limited to ``restriction``.

        ANY is returned when no rule matched, or when nothing voted for is
        inside ``restriction``.
        """
        counts = self.votes(word)
        if not counts:
            guessed = ANY_LANGUAGE
        else:
            guessed = LanguageSet.from_languages(counts)

        result = guessed.restrict_to(restriction)
        if result.is_empty():
            return ANY_LANGUAGE
        return result

    def __len__(self) -> int:
        return len(self.rules)

    def __repr__(self) -> str:
        return f"LanguageGuesser({self.name!r}, {len(self.rules)} rules)"
