"""
Host capability queries.

Answers the two questions the scan layer asks about the machine it runs on:
whether the process is elevated, and which local accounts exist. Account
enumeration itself lives with the platform layouts in
``extractors._shared.path_utils``.
"""

from __future__ import annotations

import ctypes
import os
import platform
import socket
from typing import List, Optional

from core.logging import get_logger
from core.models import UserContext

LOGGER = get_logger("core.platform")


def is_elevated() -> bool:
    """
    True when the process runs as Administrator (Windows) or root (POSIX).

    A failing check counts as not elevated; the caller only uses the answer
    to decide whether to print an advisory.
    """
    if platform.system() == "Windows":
        try:
            return bool(ctypes.windll.shell32.IsUserAnAdmin())
        except (AttributeError, OSError) as exc:
            LOGGER.debug("IsUserAnAdmin check failed: %s", exc)
            return False

    geteuid = getattr(os, "geteuid", None)
    if geteuid is None:
        return False
    return geteuid() == 0


def machine_name() -> str:
    """Host name recorded in reports and export file names."""
    name = platform.node() or socket.gethostname()
    return name.split(".")[0] or "unknown"


def list_user_accounts(system: Optional[str] = None) -> List[UserContext]:
    """Local accounts with a home directory, sorted by username."""
    from extractors._shared.path_utils import get_platform_layout

    return get_platform_layout(system).list_user_accounts()
