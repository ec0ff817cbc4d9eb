"""
Beider-Morse phonetic engine.

Encodes a name word by word: guess the word's languages, rewrite it with
each language's orthographic rules, merge the alternatives, fold them
through the final approx/exact rules and format the result.

Usage:
    from bmpm.engine import PhoneticEngine

    engine = PhoneticEngine.from_config()         # loads bmpm.toml
    engine.encode("Schwarzenegger")               # "(SvarcnEgYr|...)"
    engine.encode_with_languages("Renault", LanguageSet.of("french"))

    # Or build manually:
    corpus = RuleCorpus.from_dir("rules/")
    engine = PhoneticEngine(corpus, name_type="gen", rule_type="exact")
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Iterable

from bmpm.corpus import COMMON, RuleCorpus
from bmpm.errors import CorpusError, CoverageError
from bmpm.languages import ANY, ANY_LANGUAGE, LanguageSet, NameType, RuleType
from bmpm.phoneme import (
    Phoneme,
    PhonemeExpr,
    concat,
    dedupe,
    from_phonemes,
    make_string,
    truncate,
)
from bmpm.rules import RuleTable

logger = logging.getLogger(__name__)

DEFAULT_MAX_PHONEMES = 20
DEFAULT_SEPARATOR = "-"

# Standalone words dropped before encoding, per tradition.
NAME_PREFIXES: dict[NameType, frozenset[str]] = {
    NameType.ASHKENAZI: frozenset({"bar", "ben", "da", "de", "van", "von"}),
    NameType.SEPHARDIC: frozenset({
        "al", "el", "da", "dal", "de", "del", "dela", "della",
        "des", "di", "do", "dos", "du", "van", "von",
    }),
    NameType.GENERIC: frozenset(),
}

_ENGINE_KEYS = ("name_type", "rule_type", "languages", "max_phonemes", "separator", "concat")


class PhoneticEngine:
    """Encodes names with one name type's rule corpus.

    All settings are fixed at construction.  ``encode`` keeps no state
    between calls, so one engine can serve many threads at once.
    """

    def __init__(
        self,
        corpus: RuleCorpus,
        name_type: NameType | str = NameType.GENERIC,
        rule_type: RuleType | str = RuleType.APPROX,
        languages: LanguageSet | Iterable[str] | None = None,
        max_phonemes: int = DEFAULT_MAX_PHONEMES,
        separator: str = DEFAULT_SEPARATOR,
        concat: bool = False,
    ):
        self.corpus = corpus
        self.name_type = NameType.parse(name_type)
        self.rule_type = RuleType.parse(rule_type)
        if not self.rule_type.is_final:
            raise ValueError(f"rule_type must be approx or exact, got {self.rule_type}")
        if max_phonemes < 1:
            raise ValueError(f"max_phonemes must be positive, got {max_phonemes}")
        self.max_phonemes = max_phonemes
        self.separator = separator
        self.concat = concat

        if corpus.rules_table(self.name_type, ANY) is None:
            raise CorpusError(f"Corpus has no {self.name_type}_rules_any table")
        if corpus.table(self.name_type, self.rule_type, COMMON) is None:
            raise CorpusError(
                f"Corpus has no {self.name_type}_{self.rule_type}_{COMMON} table"
            )
        self.languages = self._restriction(languages)

    def _restriction(self, languages: LanguageSet | Iterable[str] | None) -> LanguageSet:
        if languages is None:
            return ANY_LANGUAGE
        if not isinstance(languages, LanguageSet):
            if isinstance(languages, str):
                languages = [languages]
            languages = list(languages)
            if not languages:
                return ANY_LANGUAGE
            languages = LanguageSet.from_languages(languages)
        known = set(self.corpus.languages(self.name_type))
        unknown = [lang for lang in languages if lang not in known]
        if unknown:
            raise ValueError(
                f"Unknown language(s) for {self.name_type}: {', '.join(unknown)}"
            )
        return languages

    # ── Construction helpers ─────────────────────────────────────────────

    @classmethod
    def from_config(
        cls, config_path: str | Path = "bmpm.toml", **overrides
    ) -> PhoneticEngine:
        """Build an engine from a TOML config file.

        The ``[rules] dir`` path is resolved relative to the config file's
        directory.  Keyword overrides that are not None win over the
        ``[engine]`` table.
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config not found: {config_path}")

        with config_path.open("rb") as f:
            cfg = tomllib.load(f)

        rules_dir = overrides.pop("rules_dir", None) or cfg.get("rules", {}).get("dir")
        if not rules_dir:
            raise CorpusError(f"[rules] dir not configured in {config_path}")
        rules_path = Path(rules_dir)
        if not rules_path.is_absolute():
            rules_path = config_path.parent / rules_path

        engine_cfg = cfg.get("engine", {})
        settings = {key: engine_cfg[key] for key in _ENGINE_KEYS if key in engine_cfg}
        settings.update({k: v for k, v in overrides.items() if v is not None})

        name_type = NameType.parse(settings.get("name_type", NameType.GENERIC))
        corpus = RuleCorpus.from_dir(rules_path, name_types=[name_type])
        logger.debug("Engine settings from %s: %s", config_path, settings)
        return cls(corpus, **settings)

    # ── Encoding ─────────────────────────────────────────────────────────

    def encode(self, name: str) -> str:
        """Encode ``name`` into its formatted phonetic representation."""
        return self.format_alternatives(self.encode_alternatives(name))

    def encode_with_languages(self, name: str, languages: LanguageSet | Iterable[str]) -> str:
        """Encode with an explicit language restriction for this call only."""
        return self.format_alternatives(self.encode_alternatives(name, languages))

    def encode_alternatives(
        self, name: str, languages: LanguageSet | Iterable[str] | None = None
    ) -> list[tuple[Phoneme, ...]]:
        """Return, per word, the final list of phonemes (no formatting)."""
        restriction = self.languages if languages is None else self._restriction(languages)
        return [
            self.encode_word(word, restriction).phonemes()
            for word in self.words(name)
        ]

    def words(self, name: str) -> list[str]:
        """Normalize ``name`` and split it into the words that get encoded."""
        words = name.lower().replace("-", " ").split()
        if self.name_type is NameType.SEPHARDIC:
            words = [w.split("'")[-1] for w in words]

        prefixes = NAME_PREFIXES[self.name_type]
        kept = [w for w in words if w and w not in prefixes]
        if kept:
            words = kept
        words = [w for w in words if w]

        if self.concat and len(words) > 1:
            words = ["".join(words)]
        return words

    def guess(self, word: str, restriction: LanguageSet | None = None) -> LanguageSet:
        """The active language set for ``word``."""
        if restriction is None:
            restriction = self.languages
        return self.corpus.guesser(self.name_type).guess(word, restriction)

    def encode_word(self, word: str, restriction: LanguageSet = ANY_LANGUAGE) -> PhonemeExpr:
        """Encode a single, already normalized word."""
        active = self.guess(word, restriction)
        logger.debug("%r: active languages %s", word, active)

        # Orthographic pass, once per candidate language.
        alternatives: list[Phoneme] = []
        for language in self._pass_languages(active):
            table = self.corpus.rules_table(self.name_type, language)
            start = Phoneme("", LanguageSet.of(language))
            alternatives.extend(self.apply_rules(table, word, start).phonemes())
        merged = dedupe(from_phonemes(alternatives))

        # Final folding pass, common rules then language-specific ones.
        for table in self._final_tables(active):
            merged = self.apply_final_rules(table, merged)

        return truncate(merged, self.max_phonemes)

    def apply_rules(self, table: RuleTable, text: str, start: PhonemeExpr) -> PhonemeExpr:
        """Walk ``text`` left to right, appending each matched rule's phonetic.

        Raises CoverageError when nothing matches at some position.
        """
        result = start
        i = 0
        while i < len(text):
            rule = table.match(text, i)
            if rule is None:
                raise CoverageError(text, i, table.name)
            result = truncate(dedupe(concat(result, rule.phonetic)), self.max_phonemes)
            i += len(rule.pattern)
        return result

    def apply_final_rules(self, table: RuleTable, expr: PhonemeExpr) -> PhonemeExpr:
        """Re-walk every alternative of ``expr`` through a final-pass table."""
        folded: list[Phoneme] = []
        for phoneme in expr.phonemes():
            start = Phoneme("", phoneme.languages)
            folded.extend(self.apply_rules(table, phoneme.text, start).phonemes())
        return dedupe(from_phonemes(folded))

    def _pass_languages(self, active: LanguageSet) -> list[str]:
        if active.is_any:
            return [ANY]
        return list(active)

    def _final_tables(self, active: LanguageSet) -> list[RuleTable]:
        tables = [self.corpus.table(self.name_type, self.rule_type, COMMON)]
        language = active.any() if active.is_singleton() else ANY
        specific = self.corpus.table(self.name_type, self.rule_type, language)
        if specific is not None:
            tables.append(specific)
        return tables

    def format_alternatives(self, words: list[tuple[Phoneme, ...]]) -> str:
        """Format the output of ``encode_alternatives`` the way ``encode`` does."""
        return self.separator.join(make_string(from_phonemes(w)) for w in words)

    # ── Introspection ────────────────────────────────────────────────────

    def summary(self) -> str:
        lines = [f"PhoneticEngine ({self.name_type}, {self.rule_type})"]
        lines.append(f"  Languages:    {self.languages}")
        lines.append(f"  Max phonemes: {self.max_phonemes}")
        lines.append(f"  Separator:    {self.separator!r}")
        lines.append(f"  Concat:       {self.concat}")
        for sub_line in self.corpus.summary().split("\n"):
            lines.append(f"  {sub_line}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"PhoneticEngine({self.name_type}, {self.rule_type})"
