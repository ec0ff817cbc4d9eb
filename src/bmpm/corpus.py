"""
Load Beider-Morse rule corpora from a directory of text files.

Layout (``nt`` is ``ash``, ``gen`` or ``sep``):

    {nt}_languages.txt              one language per line, includes "any"
    {nt}_lang.txt                   language-guessing rules (optional)
    {nt}_rules_{language}.txt       one per declared language
    {nt}_approx_common.txt          final pass, approximate
    {nt}_exact_common.txt           final pass, exact
    {nt}_approx_{language}.txt      optional language-specific final pass
    {nt}_exact_{language}.txt       optional language-specific final pass

Every file uses the same syntax: ``//`` comments, ``/* ... */`` blocks,
``#include other_file`` and rule lines made of four quoted fields:

    "pattern" "left context" "right context" "phonetic"

Usage:
    from bmpm.corpus import RuleCorpus

    corpus = RuleCorpus.from_dir("rules/")
    table = corpus.table(NameType.GENERIC, RuleType.RULES, "any")
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, Iterator

from bmpm.errors import CorpusError
from bmpm.guesser import LanguageGuesser, LanguageRule
from bmpm.languages import ANY, LanguageSet, NameType, RuleType
from bmpm.phoneme import Phoneme, PhonemeExpr, PhonemeList
from bmpm.rules import Rule, RuleTable

logger = logging.getLogger(__name__)

COMMON = "common"

_RULE_LINE_RE = re.compile(
    r'^\s*"(.*?)"\s+"(.*?)"\s+"(.*?)"\s+"(.*?)"\s*(//.*)?$'
)
_INCLUDE_RE = re.compile(r"^\s*#include\s+([A-Za-z0-9_]+)\s*(//.*)?$")
_LANGUAGE_NAME_RE = re.compile(r"^[a-z]+$")


# ── Line-level parsing ──────────────────────────────────────────────────────

def _content_lines(text: str) -> Iterator[tuple[int, str]]:
    """Yield (line_number, stripped_line), skipping blanks and comments."""
    in_comment = False
    for number, line in enumerate(text.splitlines(), start=1):
        line = line.strip()
        if in_comment:
            if line.endswith("*/"):
                in_comment = False
            continue
        if not line or line.startswith("//"):
            continue
        if line.startswith("/*"):
            in_comment = not line.endswith("*/")
            continue
        yield number, line


def parse_phoneme(
    text: str,
    known: frozenset[str] | None = None,
    filename: str | None = None,
    line: int | None = None,
) -> Phoneme:
    """Parse ``text`` or ``text[lang1+lang2]`` into a Phoneme."""
    if "[" not in text:
        return Phoneme(text)
    if not text.endswith("]"):
        raise CorpusError(
            f"Phoneme {text!r} has a '[' but does not end with ']'", filename, line
        )
    idx = text.index("[")
    languages = [lang for lang in text[idx + 1:-1].split("+") if lang]
    if not languages:
        raise CorpusError(f"Phoneme {text!r} has an empty language list", filename, line)
    if known is not None:
        unknown = [lang for lang in languages if lang not in known]
        if unknown:
            raise CorpusError(
                f"Unknown language(s) {', '.join(unknown)} in {text!r}", filename, line
            )
    return Phoneme(text[:idx], LanguageSet.from_languages(languages))


def parse_phonetic(
    text: str,
    known: frozenset[str] | None = None,
    filename: str | None = None,
    line: int | None = None,
) -> PhonemeExpr:
    """Parse a phonetic field: a phoneme, or ``(alt1|alt2[lang]|...)``.

    An empty alternative (``(a|)``) is kept as the empty phoneme.
    """
    if not text.startswith("("):
        return parse_phoneme(text, known, filename, line)
    if not text.endswith(")"):
        raise CorpusError(f"Alternation {text!r} does not end with ')'", filename, line)
    body = text[1:-1]
    return PhonemeList(tuple(
        parse_phoneme(part, known, filename, line) for part in body.split("|")
    ))


def parse_languages_list(text: str, filename: str | None = None) -> list[str]:
    """Parse a ``{nt}_languages.txt`` file, keeping declaration order."""
    languages: list[str] = []
    for number, line in _content_lines(text):
        name = line.split("//", 1)[0].strip()
        if not _LANGUAGE_NAME_RE.match(name):
            raise CorpusError(f"Invalid language name {name!r}", filename, number)
        if name not in languages:
            languages.append(name)
    return languages


class _Resolver:
    """Reads rule files from a directory, following ``#include`` lines."""

    def __init__(self, directory: Path):
        self.directory = directory

    def path(self, name: str) -> Path:
        return self.directory / f"{name}.txt"

    def exists(self, name: str) -> bool:
        return self.path(name).exists()

    def read(self, name: str) -> str:
        path = self.path(name)
        try:
            with path.open(encoding="utf-8-sig") as f:
                return f.read()
        except OSError as e:
            raise CorpusError(f"Cannot read rule file: {e}", filename=path.name) from e


def _check_regex(pattern: str, filename: str, line: int) -> None:
    try:
        re.compile(pattern)
    except re.error as e:
        raise CorpusError(f"Bad context regex {pattern!r}: {e}", filename, line) from e


def _rule_lines(
    resolver: _Resolver, name: str, stack: tuple[str, ...] = ()
) -> Iterator[tuple[str, int, tuple[str, str, str, str]]]:
    """Yield (filename, line, fields) for every rule line, includes spliced in."""
    if name in stack:
        raise CorpusError(f"Include cycle: {' -> '.join(stack + (name,))}", f"{name}.txt")
    filename = f"{name}.txt"
    text = resolver.read(name)

    for number, line in _content_lines(text):
        m = _INCLUDE_RE.match(line)
        if m:
            included = m.group(1)
            if not resolver.exists(included):
                raise CorpusError(f"Included file {included}.txt not found", filename, number)
            yield from _rule_lines(resolver, included, stack + (name,))
            continue

        m = _RULE_LINE_RE.match(line)
        if m is None:
            raise CorpusError(f"Malformed rule line: {line!r}", filename, number)
        pattern, left, right, phonetic = m.group(1, 2, 3, 4)
        if not pattern:
            raise CorpusError("Rule pattern must not be empty", filename, number)
        _check_regex(left, filename, number)
        _check_regex(right, filename, number)
        yield filename, number, (pattern, left, right, phonetic)


def load_rules(
    resolver: _Resolver, name: str, known: frozenset[str] | None = None
) -> RuleTable:
    """Load the rule file ``name`` (without extension) into a RuleTable."""
    rules = []
    for filename, number, (pattern, left, right, phonetic) in _rule_lines(resolver, name):
        rules.append(Rule(
            pattern,
            parse_phonetic(phonetic, known, filename, number),
            left_context=left,
            right_context=right,
            location=f"{filename}:{number}",
        ))
    return RuleTable(rules, name=name)


def load_language_rules(
    resolver: _Resolver, name: str, known: frozenset[str] | None = None
) -> LanguageGuesser:
    """Load guessing rules; the fourth field lists languages (``a+b``)."""
    rules = []
    for filename, number, (pattern, left, right, langs) in _rule_lines(resolver, name):
        languages = [lang for lang in langs.split("+") if lang]
        if not languages or ANY in languages:
            raise CorpusError(
                f"Language rule must name specific languages, got {langs!r}",
                filename, number,
            )
        if known is not None:
            unknown = [lang for lang in languages if lang not in known]
            if unknown:
                raise CorpusError(
                    f"Unknown language(s) {', '.join(unknown)}", filename, number
                )
        rules.append(LanguageRule(
            pattern,
            LanguageSet.from_languages(languages),
            left_context=left,
            right_context=right,
            location=f"{filename}:{number}",
        ))
    return LanguageGuesser(rules, name=name)


# ── Corpus ──────────────────────────────────────────────────────────────────

class RuleCorpus:
    """
    All rule tables and guessers, keyed by name type.

    Tables are stored under (name_type, rule_type, language), where the
    language of a final-pass table may also be ``"common"``.  A corpus can
    be loaded with ``from_dir`` or assembled in code with ``add_table``,
    ``add_guesser`` and ``set_languages``.
    """

    def __init__(self):
        self.tables: dict[tuple[NameType, RuleType, str], RuleTable] = {}
        self.guessers: dict[NameType, LanguageGuesser] = {}
        self.language_lists: dict[NameType, tuple[str, ...]] = {}
        self.source: Path | None = None

    @classmethod
    def from_dir(
        cls,
        directory: str | Path,
        name_types: Iterable[NameType | str] | None = None,
    ) -> RuleCorpus:
        """Load every requested name type (default: all present) from ``directory``."""
        directory = Path(directory)
        if not directory.is_dir():
            raise CorpusError(f"Rule directory not found: {directory}")

        resolver = _Resolver(directory)
        if name_types is None:
            wanted = [nt for nt in NameType if resolver.exists(f"{nt}_languages")]
            if not wanted:
                raise CorpusError(f"No *_languages.txt file in {directory}")
        else:
            wanted = [NameType.parse(nt) for nt in name_types]

        corpus = cls()
        corpus.source = directory
        for name_type in wanted:
            corpus._load_name_type(resolver, name_type)
        return corpus

    def _load_name_type(self, resolver: _Resolver, name_type: NameType) -> None:
        list_name = f"{name_type}_languages"
        if not resolver.exists(list_name):
            raise CorpusError(f"Missing {list_name}.txt in {resolver.directory}")
        languages = parse_languages_list(resolver.read(list_name), f"{list_name}.txt")
        if ANY not in languages:
            raise CorpusError("Language list must declare 'any'", f"{list_name}.txt")
        self.set_languages(name_type, languages)
        known = frozenset(languages)

        for language in languages:
            name = f"{name_type}_{RuleType.RULES}_{language}"
            if not resolver.exists(name):
                raise CorpusError(f"Missing rules file {name}.txt for declared language")
            self.add_table(name_type, RuleType.RULES, language, load_rules(resolver, name, known))

        for rule_type in (RuleType.APPROX, RuleType.EXACT):
            common = f"{name_type}_{rule_type}_{COMMON}"
            if not resolver.exists(common):
                raise CorpusError(f"Missing final rules file {common}.txt")
            self.add_table(name_type, rule_type, COMMON, load_rules(resolver, common, known))

            for language in languages:
                name = f"{name_type}_{rule_type}_{language}"
                if resolver.exists(name):
                    self.add_table(name_type, rule_type, language, load_rules(resolver, name, known))
                else:
                    logger.debug("No %s.txt, %s final pass uses common rules only", name, language)

        lang_name = f"{name_type}_lang"
        if resolver.exists(lang_name):
            self.add_guesser(name_type, load_language_rules(resolver, lang_name, known))
        else:
            logger.warning("No %s.txt; language guessing disabled for %s", lang_name, name_type)

        logger.info(
            "Loaded %s corpus: %d languages, %d rules",
            name_type, len(languages), self.rule_count(name_type),
        )

    # ── Construction helpers ─────────────────────────────────────────────

    def set_languages(self, name_type: NameType | str, languages: Iterable[str]) -> None:
        name_type = NameType.parse(name_type)
        self.language_lists[name_type] = tuple(dict.fromkeys(languages))

    def add_table(
        self,
        name_type: NameType | str,
        rule_type: RuleType | str,
        language: str,
        table: RuleTable | Iterable[Rule],
    ) -> RuleTable:
        name_type = NameType.parse(name_type)
        rule_type = RuleType.parse(rule_type)
        if not isinstance(table, RuleTable):
            table = RuleTable(table, name=f"{name_type}_{rule_type}_{language}")
        self.tables[(name_type, rule_type, language)] = table
        return table

    def add_guesser(
        self, name_type: NameType | str, guesser: LanguageGuesser | Iterable[LanguageRule]
    ) -> LanguageGuesser:
        name_type = NameType.parse(name_type)
        if not isinstance(guesser, LanguageGuesser):
            guesser = LanguageGuesser(guesser, name=f"{name_type}_lang")
        self.guessers[name_type] = guesser
        return guesser

    # ── Lookup ───────────────────────────────────────────────────────────

    def name_types(self) -> list[NameType]:
        return [nt for nt in NameType if any(key[0] is nt for key in self.tables)]

    def table(
        self, name_type: NameType | str, rule_type: RuleType | str, language: str
    ) -> RuleTable | None:
        return self.tables.get((NameType.parse(name_type), RuleType.parse(rule_type), language))

    def rules_table(self, name_type: NameType | str, language: str) -> RuleTable | None:
        """The orthographic table for ``language``, falling back to ``any``."""
        table = self.table(name_type, RuleType.RULES, language)
        if table is None:
            table = self.table(name_type, RuleType.RULES, ANY)
        return table

    def guesser(self, name_type: NameType | str) -> LanguageGuesser:
        """The guesser for ``name_type``; an empty one always answers ANY."""
        name_type = NameType.parse(name_type)
        guesser = self.guessers.get(name_type)
        if guesser is None:
            guesser = LanguageGuesser(name=f"{name_type}_lang")
        return guesser

    def languages(self, name_type: NameType | str) -> tuple[str, ...]:
        return self.language_lists.get(NameType.parse(name_type), (ANY,))

    def rule_count(self, name_type: NameType | str | None = None) -> int:
        if name_type is not None:
            name_type = NameType.parse(name_type)
        return sum(
            len(table) for (nt, _rt, _lang), table in self.tables.items()
            if name_type is None or nt is name_type
        )

    def summary(self) -> str:
        lines = ["Beider-Morse rule corpus"]
        if self.source is not None:
            lines.append(f"  Rules dir:  {self.source}")
        for name_type in self.name_types():
            languages = self.languages(name_type)
            lines.append(f"  [{name_type}]")
            lines.append(f"    Languages:  {len(languages)} ({', '.join(languages)})")
            lines.append(f"    Rules:      {self.rule_count(name_type):,}")
            guesser = self.guessers.get(name_type)
            lines.append(f"    Guesser:    {len(guesser) if guesser else 0} rules")
        return "\n".join(lines)
