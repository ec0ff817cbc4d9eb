"""bmpm: Beider-Morse phonetic matching for names."""

from bmpm.errors import PhoneticError, CorpusError, CoverageError, UnknownNameTypeError
from bmpm.languages import LanguageSet, NameType, RuleType, ANY_LANGUAGE, NO_LANGUAGES
from bmpm.phoneme import Phoneme, PhonemeList, concat, dedupe, truncate
from bmpm.rules import Rule, RuleTable
from bmpm.guesser import LanguageGuesser, LanguageRule
from bmpm.corpus import RuleCorpus
from bmpm.engine import PhoneticEngine
from bmpm.soundex import Soundex

__all__ = [
    "PhoneticError", "CorpusError", "CoverageError", "UnknownNameTypeError",
    "LanguageSet", "NameType", "RuleType", "ANY_LANGUAGE", "NO_LANGUAGES",
    "Phoneme", "PhonemeList", "concat", "dedupe", "truncate",
    "Rule", "RuleTable",
    "LanguageGuesser", "LanguageRule",
    "RuleCorpus",
    "PhoneticEngine",
    "Soundex",
]
