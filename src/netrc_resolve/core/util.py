from __future__ import annotations

import os
import stat
from pathlib import Path
from typing import Optional


def default_netrc_path() -> Path:
    """Return the netrc file curl would read.

    Rules:
    - ``$NETRC`` wins when set.
    - Otherwise ``~/.netrc``.
    - On Windows, ``~/_netrc`` when there is no ``~/.netrc``.
    """
    if env_path := os.environ.get("NETRC"):
        return Path(env_path).expanduser()
    path = Path.home() / ".netrc"
    if os.name == "nt" and not path.exists():
        alt = Path.home() / "_netrc"
        if alt.exists():
            return alt
    return path


def insecure_permissions(path: Path) -> Optional[int]:
    """Return the mode of ``path`` if group or others may access it."""
    if os.name != "posix":
        return None
    mode = stat.S_IMODE(path.stat().st_mode)
    if mode & 0o077:
        return mode
    return None

__all__ = ["default_netrc_path", "insecure_permissions"]
