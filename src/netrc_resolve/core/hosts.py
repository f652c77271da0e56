"""Host normalization.

Machine names in a netrc file and hosts asked for by callers are compared in
canonical form, the same form a URL parser gives a host:

- ``[...]`` is an IPv6 literal.
- Domains are percent-decoded, lowercased and converted to their ASCII
  compatible (punycode) form, so ``É.com`` and ``xn--9ca.com`` are equal.
- A domain whose last label is a number is an IPv4 address, including the
  shorthand, hex and octal forms (``16843009``, ``0x1.1.1.1``, ``1.1.257``).
"""

from __future__ import annotations

import ipaddress
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional
from urllib.parse import unquote

import idna

from .errors import InvalidHostError

# Characters that may not appear in a host at all, and the extra ones a
# domain may not contain.
_FORBIDDEN_HOST = set("\x00\t\n\r #/:<>?@[\\]^|")
_FORBIDDEN_DOMAIN = _FORBIDDEN_HOST | {chr(c) for c in range(0x20)} | {"%", "\x7f"}

_LAST_LABEL_NUMBER_RE = re.compile(r"[0-9]+|0[xX][0-9A-Fa-f]*")
_PART_RE = {
    10: re.compile(r"[0-9]+"),
    16: re.compile(r"[0-9A-Fa-f]*"),
    8: re.compile(r"[0-7]*"),
}


class HostKind(str, Enum):
    DOMAIN = "domain"
    IPV4 = "ipv4"
    IPV6 = "ipv6"


@dataclass(frozen=True)
class Host:
    kind: HostKind
    name: str

    def __str__(self) -> str:
        if self.kind is HostKind.IPV6:
            return f"[{self.name}]"
        return self.name

    @classmethod
    def parse(cls, text: str) -> Host:
        return parse_host(text)


def parse_host(text: str) -> Host:
    """Normalize ``text`` to a :class:`Host`, raising InvalidHostError."""
    if text.startswith("["):
        if not text.endswith("]"):
            raise InvalidHostError(f"unterminated IPv6 literal: {text!r}")
        return Host(HostKind.IPV6, _parse_ipv6(text[1:-1]))

    decoded = unquote(text)
    domain = _domain_to_ascii(decoded)
    if not domain:
        raise InvalidHostError("empty host")
    bad = set(domain) & _FORBIDDEN_DOMAIN
    if bad:
        raise InvalidHostError(f"forbidden characters {''.join(sorted(bad))!r} in host {text!r}")

    if _ends_in_number(domain):
        return Host(HostKind.IPV4, _parse_ipv4(domain))
    return Host(HostKind.DOMAIN, domain)


def _domain_to_ascii(text: str) -> str:
    if text.isascii():
        return text.lower()
    try:
        return idna.encode(text, uts46=True).decode("ascii")
    except idna.IDNAError as exc:
        raise InvalidHostError(f"invalid internationalized domain {text!r}: {exc}") from exc


def _parse_ipv6(text: str) -> str:
    if "%" in text:
        raise InvalidHostError(f"zone identifiers are not allowed: [{text}]")
    try:
        return str(ipaddress.IPv6Address(text))
    except ValueError as exc:
        raise InvalidHostError(f"invalid IPv6 literal [{text}]: {exc}") from exc


def _split_ipv4(domain: str) -> list[str]:
    parts = domain.split(".")
    if parts[-1] == "" and len(parts) > 1:
        parts.pop()
    return parts


def _ends_in_number(domain: str) -> bool:
    last = _split_ipv4(domain)[-1]
    return bool(last) and _LAST_LABEL_NUMBER_RE.fullmatch(last) is not None


def _ipv4_number(part: str) -> Optional[int]:
    if not part:
        return None
    radix = 10
    if part[:2] in ("0x", "0X"):
        part, radix = part[2:], 16
    elif len(part) > 1 and part.startswith("0"):
        part, radix = part[1:], 8
    if not _PART_RE[radix].fullmatch(part):
        return None
    return int(part, radix) if part else 0


def _parse_ipv4(domain: str) -> str:
    parts = _split_ipv4(domain)
    if len(parts) > 4:
        raise InvalidHostError(f"too many parts in IPv4 address {domain!r}")

    numbers = []
    for part in parts:
        number = _ipv4_number(part)
        if number is None:
            raise InvalidHostError(f"invalid IPv4 part {part!r} in {domain!r}")
        numbers.append(number)

    if any(n > 255 for n in numbers[:-1]) or numbers[-1] >= 256 ** (5 - len(numbers)):
        raise InvalidHostError(f"IPv4 address out of range: {domain!r}")

    value = numbers[-1]
    for i, n in enumerate(numbers[:-1]):
        value += n * 256 ** (3 - i)
    return str(ipaddress.IPv4Address(value))
