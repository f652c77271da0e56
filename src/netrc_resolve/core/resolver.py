from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Optional, Protocol, Union

from .errors import NetrcSourceError
from .hosts import Host, parse_host
from .model import Configuration, RawRecord, ValidatedEntry
from .parser import HostParser, parse_config

logger = logging.getLogger(__name__)


class ByteSource(Protocol):
    def read(self) -> bytes: ...


class PathSource:
    """Byte source that opens ``path`` only when it is read."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path).expanduser()

    def read(self) -> bytes:
        return self.path.read_bytes()

    def __repr__(self) -> str:
        return f"PathSource({str(self.path)!r})"


class RawNetrcResolver:
    """Look up netrc records without any validation.

    The source is read and parsed on the first lookup only; the parsed
    configuration is reused by every later lookup on this instance.
    """

    def __init__(self, source: ByteSource, host_parser: HostParser = parse_host) -> None:
        self._source: Optional[ByteSource] = source
        self._parse_host = host_parser
        self._config: Optional[Configuration] = None
        self._lock = threading.Lock()

    @classmethod
    def from_path(cls, path: Union[str, Path], host_parser: HostParser = parse_host) -> RawNetrcResolver:
        return cls(PathSource(path), host_parser)

    @property
    def config(self) -> Configuration:
        if self._config is None:
            with self._lock:
                if self._config is None:
                    self._config = self._load()
        return self._config

    def _load(self) -> Configuration:
        try:
            text = self._source.read().decode("utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise NetrcSourceError(f"cannot read netrc source {self._source!r}: {exc}") from exc
        config = parse_config(text, self._parse_host)
        logger.debug(
            "parsed netrc: %d machine entries, default %s",
            len(config.entries),
            "present" if config.default is not None else "absent",
        )
        self._source = None
        return config

    def host(self, host: Union[Host, str]) -> Host:
        if isinstance(host, Host):
            return host
        return self._parse_host(host)

    def lookup(self, host: Union[Host, str]) -> Optional[RawRecord]:
        """Return the record for ``host``, else the default record, else None.

        Raises InvalidHostError if ``host`` is a string that does not
        normalize, and NetrcSourceError if the source cannot be read.
        """
        return self.config.record_for(self.host(host))


class NetrcResolver:
    """Look up netrc credentials the way curl applies them.

    - A usable entry must have a password; the login is optional.
    - The account value is used when the login is missing.
    - A host's own record is never mixed with the default record, and an
      incomplete host record does not fall back to the default.
    """

    def __init__(self, source: ByteSource, host_parser: HostParser = parse_host) -> None:
        self.raw = RawNetrcResolver(source, host_parser)

    @classmethod
    def from_path(cls, path: Union[str, Path], host_parser: HostParser = parse_host) -> NetrcResolver:
        return cls(PathSource(path), host_parser)

    @property
    def config(self) -> Configuration:
        return self.raw.config

    def lookup(self, host: Union[Host, str]) -> Optional[ValidatedEntry]:
        record = self.raw.lookup(host)
        if record is None:
            return None
        return ValidatedEntry.from_record(record)
