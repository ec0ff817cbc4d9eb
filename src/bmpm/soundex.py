"""
American Soundex: first letter plus three digits.

A single-pass encoder sharing the ``encode(name) -> str`` contract of
``PhoneticEngine``.

Usage:
    from bmpm.soundex import Soundex

    Soundex().encode("Robert")     # "R163"
"""

from __future__ import annotations

from dataclasses import dataclass

# Digit for each letter A..Z; "0" marks vowels and other separators.
US_ENGLISH_MAPPING = "01230120022455012623010202"

CODE_LENGTH = 4


@dataclass(frozen=True, slots=True)
class Soundex:
    mapping: str = US_ENGLISH_MAPPING
    special_case_h_w: bool = True  # H and W do not separate equal codes

    def __post_init__(self) -> None:
        if len(self.mapping) != 26:
            raise ValueError(f"Soundex mapping must have 26 entries, got {len(self.mapping)}")

    def _code(self, ch: str) -> str | None:
        idx = ord(ch) - ord("A")
        if 0 <= idx < 26:
            return self.mapping[idx]
        return None

    def encode(self, name: str) -> str:
        letters = [ch for ch in name.upper() if self._code(ch) is not None]
        if not letters:
            return ""

        out = [letters[0]]
        last = self._code(letters[0])
        for ch in letters[1:]:
            if len(out) == CODE_LENGTH:
                break
            if self.special_case_h_w and ch in "HW":
                continue
            digit = self._code(ch)
            if digit != "0" and digit != last:
                out.append(digit)
            last = digit

        return "".join(out).ljust(CODE_LENGTH, "0")
