"""Exception types raised by netrc lookups."""

from __future__ import annotations


class NetrcError(Exception):
    """Base exception for all netrc-resolve errors."""


class NetrcSourceError(NetrcError):
    """The netrc byte source could not be read or decoded as UTF-8."""


class InvalidHostError(NetrcError, ValueError):
    """A host name or IP literal could not be normalized."""
