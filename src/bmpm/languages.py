"""
Name types, rule types and language sets.

A language is a plain string taken from the list a corpus declares for a
name type (``gen_languages.txt`` etc.).  ``LanguageSet`` wraps a set of
them, with ``ANY_LANGUAGE`` meaning "unrestricted" and ``NO_LANGUAGES``
the empty outcome of an intersection.

Usage:
    from bmpm.languages import LanguageSet, ANY_LANGUAGE

    german = LanguageSet.of("german")
    german.restrict_to(ANY_LANGUAGE)          # -> german
    german.restrict_to(LanguageSet.of("x"))   # -> NO_LANGUAGES
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterable, Iterator

from bmpm.errors import UnknownNameTypeError

ANY = "any"


class NameType(enum.Enum):
    """Which rule corpus (onomastic tradition) governs encoding."""

    ASHKENAZI = "ash"
    GENERIC = "gen"
    SEPHARDIC = "sep"

    @classmethod
    def parse(cls, value: str | NameType) -> NameType:
        if isinstance(value, NameType):
            return value
        for member in cls:
            if value.lower() in (member.value, member.name.lower()):
                return member
        raise UnknownNameTypeError(value)

    def __str__(self) -> str:
        return self.value


class RuleType(enum.Enum):
    """Which table governs a pass.

    RULES is the language-specific orthography pass; APPROX and EXACT are
    the final folding passes.
    """

    RULES = "rules"
    APPROX = "approx"
    EXACT = "exact"

    @classmethod
    def parse(cls, value: str | RuleType) -> RuleType:
        if isinstance(value, RuleType):
            return value
        try:
            return cls(value.lower())
        except ValueError:
            raise ValueError(f"Unknown rule type: {value!r}") from None

    @property
    def is_final(self) -> bool:
        return self is not RuleType.RULES

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class LanguageSet:
    """An immutable set of languages, or the "any" sentinel."""

    languages: frozenset[str] = frozenset()
    is_any: bool = False

    @classmethod
    def of(cls, *languages: str) -> LanguageSet:
        return cls.from_languages(languages)

    @classmethod
    def from_languages(cls, languages: Iterable[str]) -> LanguageSet:
        langs = frozenset(languages)
        if ANY in langs:
            return ANY_LANGUAGE
        if not langs:
            return NO_LANGUAGES
        return cls(langs)

    def is_empty(self) -> bool:
        return not self.is_any and not self.languages

    def is_singleton(self) -> bool:
        return not self.is_any and len(self.languages) == 1

    def restrict_to(self, other: LanguageSet) -> LanguageSet:
        """Intersection."""
        if other.is_any:
            return self
        if self.is_any:
            return other
        return LanguageSet.from_languages(self.languages & other.languages)

    def merge(self, other: LanguageSet) -> LanguageSet:
        """Union."""
        if self.is_any or other.is_any:
            return ANY_LANGUAGE
        return LanguageSet.from_languages(self.languages | other.languages)

    def any(self) -> str | None:
        """First language in sorted order, or None for ANY / empty."""
        if self.is_any or not self.languages:
            return None
        return min(self.languages)

    def __contains__(self, language: str) -> bool:
        return self.is_any or language in self.languages

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self.languages))

    def __str__(self) -> str:
        if self.is_any:
            return ANY
        if not self.languages:
            return "none"
        return "+".join(sorted(self.languages))

    def __repr__(self) -> str:
        return f"LanguageSet({self})"


ANY_LANGUAGE = LanguageSet(is_any=True)
NO_LANGUAGES = LanguageSet()
