"""
Phoneme algebra: alternation groups tagged with language sets.

A phoneme expression is either a single ``Phoneme`` or a ``PhonemeList``
of alternatives.  Both expose ``.phonemes()`` so every operator here
accepts either variant.

Usage:
    from bmpm.phoneme import Phoneme, PhonemeList, concat, dedupe, truncate

    a = PhonemeList((Phoneme("t"), Phoneme("d", LanguageSet.of("german"))))
    b = Phoneme("o")
    concat(a, b)    # -> (to|do[german])
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from bmpm.languages import ANY_LANGUAGE, LanguageSet


@dataclass(frozen=True, slots=True)
class Phoneme:
    """A candidate pronunciation fragment and the languages it is valid for."""

    text: str
    languages: LanguageSet = ANY_LANGUAGE

    def phonemes(self) -> tuple[Phoneme, ...]:
        return (self,)

    def join(self, other: Phoneme, languages: LanguageSet) -> Phoneme:
        return Phoneme(self.text + other.text, languages)

    def merge_with_language(self, languages: LanguageSet) -> Phoneme:
        return Phoneme(self.text, self.languages.merge(languages))

    def __len__(self) -> int:
        return 1

    def __str__(self) -> str:
        if self.languages.is_any:
            return self.text
        return f"{self.text}[{self.languages}]"


@dataclass(frozen=True, slots=True)
class PhonemeList:
    """An ordered alternation of phonemes."""

    alternatives: tuple[Phoneme, ...] = ()

    def phonemes(self) -> tuple[Phoneme, ...]:
        return self.alternatives

    def __len__(self) -> int:
        return len(self.alternatives)

    def __str__(self) -> str:
        return "(" + "|".join(str(p) for p in self.alternatives) + ")"


PhonemeExpr = Phoneme | PhonemeList


def from_phonemes(phonemes: Iterable[Phoneme]) -> PhonemeExpr:
    """Build the smallest expression holding ``phonemes``."""
    items = tuple(phonemes)
    if len(items) == 1:
        return items[0]
    return PhonemeList(items)


def concat(left: PhonemeExpr, right: PhonemeExpr) -> PhonemeExpr:
    """Join every alternative of ``left`` with every alternative of ``right``.

    Pairings whose language sets do not intersect are dropped.  When that
    drops everything, the unfiltered join is returned instead, each pairing
    keeping the left alternative's languages.
    """
    joined = []
    for a in left.phonemes():
        for b in right.phonemes():
            languages = a.languages.restrict_to(b.languages)
            if not languages.is_empty():
                joined.append(a.join(b, languages))

    if not joined:
        joined = [a.join(b, a.languages) for a in left.phonemes() for b in right.phonemes()]

    return from_phonemes(joined)


def dedupe(expr: PhonemeExpr) -> PhonemeExpr:
    """Merge alternatives sharing the same text, keeping first-seen order."""
    if isinstance(expr, Phoneme):
        return expr

    merged: dict[str, Phoneme] = {}
    for phoneme in expr.phonemes():
        seen = merged.get(phoneme.text)
        if seen is None:
            merged[phoneme.text] = phoneme
        else:
            merged[phoneme.text] = seen.merge_with_language(phoneme.languages)
    return from_phonemes(merged.values())


def truncate(expr: PhonemeExpr, max_size: int) -> PhonemeExpr:
    """Keep the first ``max_size`` alternatives in generation order.

    This is a plain cap, not a ranking.
    """
    if max_size < 1:
        raise ValueError(f"max_size must be positive, got {max_size}")
    if len(expr) <= max_size:
        return expr
    return from_phonemes(expr.phonemes()[:max_size])


def make_string(expr: PhonemeExpr) -> str:
    """Render a bare text for one alternative, ``(a|b|c)`` for several."""
    texts = [p.text for p in expr.phonemes()]
    if len(texts) == 1:
        return texts[0]
    return "(" + "|".join(texts) + ")"
