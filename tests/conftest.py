"""Shared test fixtures."""

import string
from pathlib import Path

import pytest

from bmpm.corpus import RuleCorpus
from bmpm.engine import PhoneticEngine
from bmpm.guesser import LanguageRule
from bmpm.languages import LanguageSet
from bmpm.phoneme import Phoneme
from bmpm.rules import Rule

RULES_DIR = Path(__file__).parent / "data" / "rules"


def identity_rules(chars: str = string.ascii_lowercase) -> list[Rule]:
    """One single-character fallback rule per character."""
    return [Rule(c, Phoneme(c)) for c in chars]


def make_corpus(
    rules=(),
    final=(),
    name_type: str = "gen",
    languages=("any",),
    language_rules: dict[str, list[Rule]] | None = None,
    guesses=(),
    fallback: bool = True,
) -> RuleCorpus:
    """Build an in-memory corpus.

    ``rules`` go into the ``any`` orthographic table and ``final`` into
    both the approx and exact common tables.  With ``fallback`` the
    identity rules for a-z are appended to every table.
    """
    tail = identity_rules() if fallback else []
    corpus = RuleCorpus()
    corpus.set_languages(name_type, languages)
    corpus.add_table(name_type, "rules", "any", list(rules) + tail)
    for language, lang_rules in (language_rules or {}).items():
        corpus.add_table(name_type, "rules", language, list(lang_rules) + tail)
    for rule_type in ("approx", "exact"):
        corpus.add_table(name_type, rule_type, "common", list(final) + tail)
    if guesses:
        corpus.add_guesser(name_type, [
            LanguageRule(pattern, LanguageSet.of(*langs)) for pattern, langs in guesses
        ])
    return corpus


@pytest.fixture
def rules_dir() -> Path:
    return RULES_DIR


@pytest.fixture
def corpus(rules_dir) -> RuleCorpus:
    return RuleCorpus.from_dir(rules_dir)


@pytest.fixture
def engine(corpus) -> PhoneticEngine:
    return PhoneticEngine(corpus, name_type="gen", rule_type="approx")
