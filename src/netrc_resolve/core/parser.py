from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Dict, Iterable, Optional

from .errors import InvalidHostError
from .hosts import Host, parse_host
from .model import Configuration, RawRecord
from .tokenizer import Keyword, KeywordToken, MacroDef, Text, Token, tokenize

logger = logging.getLogger(__name__)

HostParser = Callable[[str], Host]

_FIELDS = {
    Keyword.LOGIN: "login",
    Keyword.PASSWORD: "password",
    Keyword.ACCOUNT: "account",
}


class ConfigBuilder:
    """Accumulates tokens into a :class:`Configuration`.

    Rules, in the order tokens are seen:

    - ``machine HOST`` commits the block before it and starts a new one.  A
      HOST that fails to normalize leaves no active host, so the block that
      follows is dropped.
    - ``default`` sends later field values to the default record until the
      next ``machine``.  Values from every ``default`` section accumulate
      field by field.
    - ``login``/``password``/``account`` take the next token as their value.
    - Any other word drops the enclosing machine block.
    - Macros are ignored.

    A later block for the same host replaces an earlier one.
    """

    def __init__(self, host_parser: HostParser = parse_host) -> None:
        self._parse_host = host_parser
        self._entries: Dict[Host, RawRecord] = {}
        self._default = RawRecord()
        self._active_host: Optional[Host] = None
        self._active_record = RawRecord()
        self._in_default = False
        self._pending: Optional[Keyword] = None

    def feed(self, token: Token) -> None:
        if self._pending is not None:
            keyword, self._pending = self._pending, None
            self._argument(keyword, token.render())
        elif isinstance(token, KeywordToken):
            self._keyword(token.keyword)
        elif isinstance(token, MacroDef):
            self.on_macro(token)
        elif isinstance(token, Text):
            self.on_text(token)

    def feed_all(self, tokens: Iterable[Token]) -> ConfigBuilder:
        for token in tokens:
            self.feed(token)
        return self

    def _keyword(self, keyword: Keyword) -> None:
        if keyword is Keyword.MACHINE:
            self.on_machine()
        elif keyword is Keyword.DEFAULT:
            self.on_default()
        else:
            self._pending = keyword

    def _argument(self, keyword: Keyword, value: str) -> None:
        if keyword is Keyword.MACHINE:
            self.on_machine_name(value)
        else:
            self.on_field(keyword, value)

    def on_machine(self) -> None:
        self._commit()
        self._in_default = False
        self._pending = Keyword.MACHINE

    def on_machine_name(self, text: str) -> None:
        try:
            self._active_host = self._parse_host(text)
        except InvalidHostError as exc:
            logger.debug("dropping machine block with unusable host %r: %s", text, exc)
            self._active_host = None
        self._active_record = RawRecord()

    def on_default(self) -> None:
        self._in_default = True

    def on_field(self, keyword: Keyword, value: Optional[str]) -> None:
        name = _FIELDS[keyword]
        if self._in_default:
            self._default = replace(self._default, **{name: value})
        else:
            self._active_record = replace(self._active_record, **{name: value})

    def on_macro(self, token: MacroDef) -> None:
        pass

    def on_text(self, token: Text) -> None:
        if self._active_host is not None:
            logger.debug("unexpected word, dropping block for %s", self._active_host)
        self._active_host = None

    def _commit(self) -> None:
        if self._active_host is None:
            return
        if self._active_host in self._entries:
            logger.debug("later block for %s replaces an earlier one", self._active_host)
        self._entries[self._active_host] = self._active_record

    def finish(self) -> Configuration:
        pending, self._pending = self._pending, None
        # A dangling ``machine`` already committed the block before it.
        if pending is not Keyword.MACHINE:
            if pending is not None:
                # A field keyword at the end of the input clears that field.
                self.on_field(pending, None)
            self._commit()
        return Configuration(
            entries=self._entries,
            default=None if self._default.is_empty() else self._default,
        )


def parse_config(text: str, host_parser: HostParser = parse_host) -> Configuration:
    return ConfigBuilder(host_parser).feed_all(tokenize(text)).finish()
