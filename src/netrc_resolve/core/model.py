from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from .hosts import Host


@dataclass(frozen=True)
class RawRecord:
    """Fields collected for one machine (or default) block, none validated."""

    login: Optional[str] = None
    password: Optional[str] = None
    account: Optional[str] = None

    def is_empty(self) -> bool:
        return self == RawRecord()


@dataclass(frozen=True)
class ValidatedEntry:
    login: Optional[str]
    password: str

    @classmethod
    def from_record(cls, record: RawRecord) -> Optional[ValidatedEntry]:
        """Return an entry for ``record``, or None when it has no password.

        The account value stands in for a missing login.
        """
        if record.password is None:
            return None
        login = record.login if record.login is not None else record.account
        return cls(login=login, password=record.password)


@dataclass(frozen=True)
class Configuration:
    entries: Mapping[Host, RawRecord] = field(default_factory=dict)
    default: Optional[RawRecord] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))

    def record_for(self, host: Host) -> Optional[RawRecord]:
        record = self.entries.get(host)
        if record is None:
            return self.default
        return record

    @property
    def hosts(self) -> list[Host]:
        return list(self.entries)
