"""Split netrc text into tokens.

There is no real grammar: tokens are whitespace-delimited words, where any
amount of whitespace (line breaks included) separates them.  Two forms are
not plain words:

- ``# `` (hash, space) starts a comment running to the end of the line.
- ``macdef NAME`` starts a macro whose body runs to the first blank line, or
  to the end of the input.  Nothing inside the body is tokenized.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List

# Unicode White_Space. Narrower than "\s", which also matches U+001C-U+001F.
_SPACE = "\t\n\v\f\r \x85\xa0\u1680\u2000-\u200a\u2028\u2029\u202f\u205f\u3000"
_WHITESPACE_RE = re.compile(f"[{_SPACE}]*")
_WORD_RE = re.compile(f"[^{_SPACE}]+")

MACRO_KEYWORD = "macdef"
MACRO_END = "\n\n"
COMMENT_START = "# "


class Keyword(str, Enum):
    MACHINE = "machine"
    DEFAULT = "default"
    LOGIN = "login"
    PASSWORD = "password"
    ACCOUNT = "account"


_KEYWORDS = {k.value: k for k in Keyword}


class Token:
    def render(self) -> str:
        """Literal text of the token, used when it fills a keyword's argument."""
        raise NotImplementedError


@dataclass(frozen=True)
class KeywordToken(Token):
    keyword: Keyword

    def render(self) -> str:
        return self.keyword.value


@dataclass(frozen=True)
class MacroDef(Token):
    name: str
    body: str

    def render(self) -> str:
        return f"{MACRO_KEYWORD} {self.name} {self.body}"


@dataclass(frozen=True)
class Comment(Token):
    text: str

    def render(self) -> str:
        return f"{COMMENT_START}{self.text}"


@dataclass(frozen=True)
class Text(Token):
    value: str

    def render(self) -> str:
        return self.value


def iter_tokens(text: str) -> Iterator[Token]:
    """Yield every token in ``text`` in source order, comments included."""
    pos = _WHITESPACE_RE.match(text).end()
    while pos < len(text):
        token, pos = _next_token(text, pos)
        yield token
        pos = _WHITESPACE_RE.match(text, pos).end()


def tokenize(text: str) -> List[Token]:
    return [t for t in iter_tokens(text) if not isinstance(t, Comment)]


def _next_token(text: str, pos: int) -> tuple[Token, int]:
    # The caller has skipped whitespace, so a word always starts at pos.
    word = _WORD_RE.match(text, pos)
    value = word.group()

    keyword = _KEYWORDS.get(value)
    if keyword is not None:
        return KeywordToken(keyword), word.end()

    if value == MACRO_KEYWORD:
        macro = _macro(text, word.end())
        if macro is not None:
            return macro

    if text.startswith(COMMENT_START, pos):
        line_end = text.find("\n", pos)
        if line_end != -1:
            return Comment(text[pos + len(COMMENT_START):line_end]), line_end

    return Text(value), word.end()


def _macro(text: str, pos: int) -> tuple[MacroDef, int] | None:
    pos = _WHITESPACE_RE.match(text, pos).end()
    name = _WORD_RE.match(text, pos)
    if name is None:
        return None
    end = text.find(MACRO_END, name.end())
    if end == -1:
        end = len(text)
    return MacroDef(name.group(), text[name.end():end]), end
