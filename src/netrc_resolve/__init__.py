"""Resolve credentials from netrc files the way command-line HTTP clients do."""

from .core.errors import InvalidHostError, NetrcError, NetrcSourceError
from .core.hosts import Host, HostKind, parse_host
from .core.model import Configuration, RawRecord, ValidatedEntry
from .core.resolver import NetrcResolver, RawNetrcResolver

__version__ = "0.1.0"

__all__ = [
    "Configuration",
    "Host",
    "HostKind",
    "InvalidHostError",
    "NetrcError",
    "NetrcResolver",
    "NetrcSourceError",
    "RawNetrcResolver",
    "RawRecord",
    "ValidatedEntry",
    "parse_host",
]
