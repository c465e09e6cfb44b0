"""
Tokenizer for the REDEX rule language.

Turns a stream of characters into a lazy stream of tokens, each carrying
the (file, row, col) location of its first character:

    for token in tokenize("swap(a, b) = pair(b, a)"):
        print(token.loc, token.kind, token.text)

Token kinds:
    (  )  ,  =  :                - punctuation, one character each
    rule shape apply done        - keywords
    any other alphanumeric run   - symbol
    anything else                - invalid (ends the stream)
    end of input                 - end (empty text)

The stream is fail-fast: after an invalid token nothing more is produced,
even if input remains. Rows and columns are zero-based.
"""

import logging
import unicodedata
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, Optional

import structlog

logger = structlog.wrap_logger(logging.getLogger(__name__), wrapper_class=structlog.stdlib.BoundLogger)


@dataclass(frozen=True)
class Loc:
    """Source location of a token's first character."""

    file_path: Optional[str]
    row: int
    col: int

    def __str__(self) -> str:
        if self.file_path is not None:
            return f"{self.file_path}:{self.row}:{self.col}"
        return f"{self.row}:{self.col}"

    def to_dict(self) -> Dict[str, Any]:
        return {"file": self.file_path, "row": self.row, "col": self.col}


class TokenKind(Enum):
    """Token classes, valued by their human-readable label."""

    SYM = "symbol"
    # Keywords
    RULE = "rule keyword"
    SHAPE = "shape keyword"
    APPLY = "apply keyword"
    DONE = "done keyword"
    # Special characters
    OPEN_PAREN = "open paren"
    CLOSE_PAREN = "close paren"
    COMMA = "comma"
    EQUALS = "equals"
    COLON = "colon"
    # Terminators
    INVALID = "invalid token"
    END = "end of input"

    @property
    def is_keyword(self) -> bool:
        return self in _KEYWORD_KINDS

    def __str__(self) -> str:
        return self.value


KEYWORDS: Dict[str, TokenKind] = {
    "rule": TokenKind.RULE,
    "shape": TokenKind.SHAPE,
    "apply": TokenKind.APPLY,
    "done": TokenKind.DONE,
}

PUNCTUATION: Dict[str, TokenKind] = {
    "(": TokenKind.OPEN_PAREN,
    ")": TokenKind.CLOSE_PAREN,
    ",": TokenKind.COMMA,
    "=": TokenKind.EQUALS,
    ":": TokenKind.COLON,
}

_KEYWORD_KINDS = frozenset(KEYWORDS.values())
_SEPARATORS = frozenset("\x1c\x1d\x1e\x1f")


def keyword_by_name(text: str) -> Optional[TokenKind]:
    """Return the keyword kind for text, or None if it is not a keyword."""
    return KEYWORDS.get(text)


def is_word_char(x: str) -> bool:
    """Check if a character can be part of a symbol."""
    return x.isalnum() or unicodedata.category(x) in ("Mn", "Mc")


def is_space(x: str) -> bool:
    """Check if a character is skipped between tokens."""
    return x.isspace() and x not in _SEPARATORS


@dataclass(frozen=True)
class Token:
    """A classified slice of source text."""

    kind: TokenKind
    text: str
    loc: Loc

    def __str__(self) -> str:
        return f"{self.loc}: {self.kind} '{self.text}'"

    def to_dict(self) -> Dict[str, Any]:
        """Convert token to dictionary for serialization."""
        return {"kind": self.kind.name.lower(), "text": self.text, "loc": self.loc.to_dict()}


class Lexer:
    """
    Pull-based tokenizer over any iterable of characters.

    The lexer is its own iterator and cannot be restarted. It yields
    exactly one END token at end of input, or exactly one INVALID token
    at the first unrecognized character, and then stops.

    Word characters are letters and digits (str.isalnum) plus combining
    marks (categories Mn and Mc), so "का" is one symbol. Whitespace is
    str.isspace minus the information separators U+001C..U+001F, which
    are invalid. Both are close to, not identical with, the Unicode
    Alphabetic/Numeric and White_Space properties.
    """

    _EMPTY = object()

    def __init__(self, chars: Iterable[str], file_path: Optional[str] = None):
        self._chars: Iterator[str] = iter(chars)
        self._peeked: Any = self._EMPTY
        self.exhausted = False
        self.file_path = file_path
        self._lnum = 0  # current row
        self._bol = 0   # character offset where the current row begins
        self._cnum = 0  # characters consumed so far

    def set_file_path(self, file_path: str) -> None:
        """Attach a file path to every location produced from now on."""
        self.file_path = file_path

    def _peek(self) -> Optional[str]:
        if self._peeked is self._EMPTY:
            self._peeked = next(self._chars, None)
        return self._peeked

    def _advance(self) -> Optional[str]:
        x = self._peek()
        self._peeked = self._EMPTY
        if x is not None:
            self._cnum += 1
        return x

    def _loc(self) -> Loc:
        return Loc(self.file_path, self._lnum, self._cnum - self._bol)

    def _skip_whitespace(self) -> None:
        while True:
            x = self._peek()
            if x is None or not is_space(x):
                return
            self._advance()
            if x == "\n":
                self._lnum += 1
                self._bol = self._cnum

    def __iter__(self) -> "Lexer":
        return self

    def __next__(self) -> Token:
        if self.exhausted:
            raise StopIteration

        self._skip_whitespace()

        loc = self._loc()
        x = self._advance()
        if x is None:
            self.exhausted = True
            return Token(TokenKind.END, "", loc)

        if x in PUNCTUATION:
            return Token(PUNCTUATION[x], x, loc)

        if not is_word_char(x):
            self.exhausted = True
            logger.bind(component="lexer").debug("invalid_token", text=x, loc=str(loc))
            return Token(TokenKind.INVALID, x, loc)

        text = [x]
        while True:
            x = self._peek()
            if x is None or not is_word_char(x):
                break
            text.append(self._advance())
        text = "".join(text)

        return Token(keyword_by_name(text) or TokenKind.SYM, text, loc)


def tokenize(text: Iterable[str], file_path: Optional[str] = None) -> Lexer:
    """Create a lexer over a string (or any iterable of characters)."""
    return Lexer(text, file_path=file_path)
