"""Exceptions raised while loading rule corpora and encoding names."""

from __future__ import annotations


class PhoneticError(Exception):
    """Base class for every error raised by bmpm."""


class UnknownNameTypeError(PhoneticError, ValueError):
    def __init__(self, value: str):
        super().__init__(f"Unknown name type: {value!r}")
        self.value = value


class CorpusError(PhoneticError):
    """A rule file is missing or malformed.

    Raised at load time; a corpus that fails to load is never partially
    used.
    """

    def __init__(self, message: str, filename: str | None = None, line: int | None = None):
        location = ""
        if filename is not None:
            location = f"{filename}:{line}: " if line is not None else f"{filename}: "
        super().__init__(f"{location}{message}")
        self.filename = filename
        self.line = line


class CoverageError(PhoneticError):
    """No rule, not even a single-character fallback, matches at a position.

    This signals an incomplete corpus for the given input.  Skipping the
    character would silently corrupt the encoding, so the whole encode
    call fails.
    """

    def __init__(self, word: str, position: int, table: str):
        char = word[position] if 0 <= position < len(word) else ""
        super().__init__(
            f"No rule in table {table!r} matches {char!r} "
            f"at position {position} of {word!r}"
        )
        self.word = word
        self.position = position
        self.char = char
        self.table = table
