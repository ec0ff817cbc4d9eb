"""Tests for the phoneme algebra (phoneme.py)."""

import pytest
from bmpm.languages import ANY_LANGUAGE, LanguageSet
from bmpm.phoneme import (
    Phoneme,
    PhonemeList,
    concat,
    dedupe,
    from_phonemes,
    make_string,
    truncate,
)

EN = LanguageSet.of("english")
DE = LanguageSet.of("german")
FR = LanguageSet.of("french")
EN_DE = LanguageSet.of("english", "german")


def _texts(expr) -> list[str]:
    return [p.text for p in expr.phonemes()]


# ── Phoneme / PhonemeList ─────────────────────────────────────────────────────

def test_phoneme_defaults_to_any_language():
    assert Phoneme("ab").languages is ANY_LANGUAGE


def test_phoneme_is_its_own_single_alternative():
    p = Phoneme("ab", EN)
    assert p.phonemes() == (p,)
    assert len(p) == 1


def test_phoneme_str_shows_languages():
    assert str(Phoneme("ab", EN_DE)) == "ab[english+german]"
    assert str(Phoneme("ab")) == "ab"


def test_phoneme_list_str():
    expr = PhonemeList((Phoneme("a"), Phoneme("b", DE)))
    assert str(expr) == "(a|b[german])"


def test_from_phonemes_single_collapses_to_phoneme():
    p = Phoneme("a")
    assert from_phonemes([p]) is p


def test_from_phonemes_several_gives_list():
    expr = from_phonemes([Phoneme("a"), Phoneme("b")])
    assert isinstance(expr, PhonemeList)
    assert _texts(expr) == ["a", "b"]


# ── concat ────────────────────────────────────────────────────────────────────

def test_concat_single_phonemes():
    result = concat(Phoneme("ab"), Phoneme("cd"))
    assert isinstance(result, Phoneme)
    assert result.text == "abcd"
    assert result.languages is ANY_LANGUAGE


def test_concat_is_cartesian_and_order_preserving():
    left = PhonemeList((Phoneme("a1"), Phoneme("a2")))
    right = PhonemeList((Phoneme("b1"), Phoneme("b2")))
    assert _texts(concat(left, right)) == ["a1b1", "a1b2", "a2b1", "a2b2"]


def test_concat_intersects_languages():
    result = concat(Phoneme("a", EN_DE), Phoneme("b", DE))
    assert result.languages == DE


def test_concat_drops_disjoint_pairings():
    left = PhonemeList((Phoneme("a1", EN), Phoneme("a2", DE)))
    right = PhonemeList((Phoneme("b1", EN), Phoneme("b2", DE)))
    result = concat(left, right)
    assert _texts(result) == ["a1b1", "a2b2"]
    assert [p.languages for p in result.phonemes()] == [EN, DE]


def test_concat_falls_back_to_unfiltered_join():
    left = PhonemeList((Phoneme("a1", EN), Phoneme("a2", EN)))
    right = PhonemeList((Phoneme("b1", DE), Phoneme("b2", FR)))
    result = concat(left, right)
    assert _texts(result) == ["a1b1", "a1b2", "a2b1", "a2b2"]
    # Each pairing keeps the left side's languages.
    assert all(p.languages == EN for p in result.phonemes())


def test_concat_with_any_keeps_specific_side():
    result = concat(Phoneme("", ANY_LANGUAGE), Phoneme("x", FR))
    assert result.languages == FR


def test_concat_is_associative():
    a = PhonemeList((Phoneme("a"), Phoneme("A", EN)))
    b = PhonemeList((Phoneme("b", EN_DE), Phoneme("B")))
    c = PhonemeList((Phoneme("c", DE), Phoneme("C")))
    assert concat(concat(a, b), c) == concat(a, concat(b, c))


# ── dedupe ────────────────────────────────────────────────────────────────────

def test_dedupe_merges_identical_texts():
    expr = PhonemeList((Phoneme("a", EN), Phoneme("b"), Phoneme("a", DE)))
    result = dedupe(expr)
    assert _texts(result) == ["a", "b"]
    assert result.phonemes()[0].languages == EN_DE


def test_dedupe_leaves_unique_texts():
    expr = PhonemeList((Phoneme("x"), Phoneme("y"), Phoneme("z")))
    texts = _texts(dedupe(expr))
    assert texts == ["x", "y", "z"]
    assert len(texts) == len(set(texts))


def test_dedupe_any_absorbs_specific():
    expr = PhonemeList((Phoneme("a", EN), Phoneme("a")))
    assert dedupe(expr) == Phoneme("a", ANY_LANGUAGE)


def test_dedupe_single_phoneme_unchanged():
    p = Phoneme("a", EN)
    assert dedupe(p) is p


# ── truncate / make_string ────────────────────────────────────────────────────

def test_truncate_keeps_first_in_order():
    expr = PhonemeList(tuple(Phoneme(t) for t in "edcba"))
    assert _texts(truncate(expr, 3)) == ["e", "d", "c"]


def test_truncate_under_limit_is_identity():
    expr = PhonemeList((Phoneme("a"), Phoneme("b")))
    assert truncate(expr, 5) is expr


def test_truncate_to_one_gives_phoneme():
    expr = PhonemeList((Phoneme("a"), Phoneme("b")))
    assert truncate(expr, 1) == Phoneme("a")


def test_truncate_rejects_non_positive():
    with pytest.raises(ValueError):
        truncate(Phoneme("a"), 0)


def test_make_string_single():
    assert make_string(Phoneme("tumpsun", EN)) == "tumpsun"


def test_make_string_alternatives():
    expr = PhonemeList((Phoneme("vulf"), Phoneme("wulf")))
    assert make_string(expr) == "(vulf|wulf)"
