"""
Path utilities for browser extractors.

Resolves where browser profiles live on the local machine:
- Per-OS platform layouts (account roots, excluded account names,
  application data anchors)
- Local user account enumeration for all-users scans
- Profile directory enumeration for multi-profile browsers

Design Principle:
    A layout is selected once per process from ``platform.system()``; callers
    never branch on the operating system themselves. Layouts accept explicit
    roots so tests can point them at a temporary directory.
"""

from __future__ import annotations

import fnmatch
import getpass
import os
import platform
import string
from abc import ABC, abstractmethod
from pathlib import Path
from typing import FrozenSet, Iterator, List, Optional, Sequence, Set

from core.enums import Browser
from core.logging import get_logger
from core.models import UserContext
from extractors.browser_patterns import get_base_paths

LOGGER = get_logger("extractors.path_utils")


class PlatformLayout(ABC):
    """Per-OS knowledge of account roots and browser storage anchors."""

    system: str = ""

    @abstractmethod
    def platform_roots(self) -> List[Path]:
        """Directories whose children are user home directories."""

    def extra_homes(self) -> List[UserContext]:
        """Accounts living outside the platform roots (e.g. /root)."""
        return []

    @abstractmethod
    def excluded_account_names(self) -> FrozenSet[str]:
        """Directory names under the roots that are not real accounts."""

    def is_excluded_account(self, name: str) -> bool:
        lowered = name.lower()
        return any(lowered == excluded.lower() for excluded in self.excluded_account_names())

    def current_user(self) -> UserContext:
        """The invoking user, resolved from the environment."""
        try:
            username = getpass.getuser()
        except (KeyError, OSError):
            username = Path.home().name
        return UserContext(username=username, home=Path.home())

    def user_from_home(self, home: Path) -> UserContext:
        return UserContext(username=home.name, home=home)

    def list_user_accounts(self) -> List[UserContext]:
        """
        Enumerate local accounts that have a home directory.

        Unreadable roots are skipped; the result is sorted by username so
        repeated calls on an unchanged filesystem are identical.
        """
        users: List[UserContext] = []
        seen: Set[Path] = set()

        for root in self.platform_roots():
            for entry in _list_dirs(root):
                if self.is_excluded_account(entry.name) or entry in seen:
                    continue
                seen.add(entry)
                users.append(self.user_from_home(entry))

        for user in self.extra_homes():
            if user.home not in seen and _is_dir(user.home):
                seen.add(user.home)
                users.append(user)

        users.sort(key=lambda u: (u.username.lower(), str(u.home)))
        return users

    def anchor_dir(self, anchor: str, user: UserContext) -> Path:
        """Resolve an anchor name from browser_patterns to a directory."""
        if anchor == "local":
            return user.local_app_data or user.home / "AppData" / "Local"
        if anchor == "roaming":
            return user.roaming_app_data or user.home / "AppData" / "Roaming"
        return user.home

    def browser_base_paths(self, browser: Browser, user: UserContext) -> List[Path]:
        """
        Candidate profile-storage roots of a browser for a user.

        Returns:
            Paths in declaration order (they may not exist); empty when the
            browser is not available on this platform
        """
        return [
            self.anchor_dir(anchor, user) / relative
            for anchor, relative in get_base_paths(browser, self.system)
        ]


class WindowsLayout(PlatformLayout):
    system = "Windows"

    def __init__(self, user_roots: Optional[Sequence[Path]] = None) -> None:
        self._user_roots = list(user_roots) if user_roots is not None else None

    def platform_roots(self) -> List[Path]:
        if self._user_roots is not None:
            return list(self._user_roots)
        roots = []
        for letter in string.ascii_uppercase:
            candidate = Path(f"{letter}:\\Users")
            if _is_dir(candidate):
                roots.append(candidate)
        return roots

    def excluded_account_names(self) -> FrozenSet[str]:
        return frozenset({"Public", "Default", "Default User", "All Users"})

    def is_excluded_account(self, name: str) -> bool:
        # "Default.migrated" style leftovers end in a dot on some systems
        return name.endswith(".") or super().is_excluded_account(name)

    def current_user(self) -> UserContext:
        user = super().current_user()
        local = os.environ.get("LOCALAPPDATA")
        roaming = os.environ.get("APPDATA")
        return UserContext(
            username=user.username,
            home=user.home,
            local_app_data=Path(local) if local else None,
            roaming_app_data=Path(roaming) if roaming else None,
        )


class MacLayout(PlatformLayout):
    system = "Darwin"

    def __init__(self, users_root: Path = Path("/Users")) -> None:
        self._users_root = users_root

    def platform_roots(self) -> List[Path]:
        return [self._users_root]

    def excluded_account_names(self) -> FrozenSet[str]:
        return frozenset({"Shared", "Guest"})

    def is_excluded_account(self, name: str) -> bool:
        return name.startswith(".") or super().is_excluded_account(name)


class LinuxLayout(PlatformLayout):
    system = "Linux"

    def __init__(
        self,
        home_root: Path = Path("/home"),
        root_home: Optional[Path] = Path("/root"),
    ) -> None:
        self._home_root = home_root
        self._root_home = root_home

    def platform_roots(self) -> List[Path]:
        return [self._home_root]

    def extra_homes(self) -> List[UserContext]:
        if self._root_home is None:
            return []
        return [UserContext(username="root", home=self._root_home)]

    def excluded_account_names(self) -> FrozenSet[str]:
        return frozenset({"lost+found"})


_LAYOUTS = {
    "Windows": WindowsLayout,
    "Darwin": MacLayout,
    "Linux": LinuxLayout,
}

_CURRENT_LAYOUT: Optional[PlatformLayout] = None


def get_platform_layout(system: Optional[str] = None) -> PlatformLayout:
    """
    Return the layout for an operating system.

    Without an argument the host layout is created once and reused. Unknown
    systems (BSDs, etc.) get the Linux conventions.
    """
    global _CURRENT_LAYOUT
    if system is not None:
        return _LAYOUTS.get(system, LinuxLayout)()
    if _CURRENT_LAYOUT is None:
        host = platform.system()
        _CURRENT_LAYOUT = _LAYOUTS.get(host, LinuxLayout)()
        LOGGER.debug("Selected %s platform layout for host %r",
                      type(_CURRENT_LAYOUT).__name__, host)
    return _CURRENT_LAYOUT


def enumerate_browser_profiles(
    user_data_dir: Path,
    profile_patterns: Optional[List[str]] = None,
) -> Iterator[Path]:
    """
    Enumerate browser profile directories.

    Chromium browsers support multiple profiles (Default, Profile 1, etc.)
    Firefox uses random profile IDs (pass ``["*"]``).

    Args:
        user_data_dir: Browser's user data directory
                      (e.g., AppData/Local/Google/Chrome/User Data)
        profile_patterns: Glob patterns for profile dirs
                         Default: ["Default", "Profile *"] for Chromium

    Yields:
        Profile directory paths, sorted by name

    Raises:
        OSError: If the directory exists but cannot be listed
    """
    if profile_patterns is None:
        profile_patterns = ["Default", "Profile *"]

    if not user_data_dir.is_dir():
        return

    entries = sorted(user_data_dir.iterdir(), key=lambda p: p.name)
    seen: Set[Path] = set()

    for pattern in profile_patterns:
        for item in entries:
            if item in seen or not fnmatch.fnmatchcase(item.name, pattern):
                continue
            if _is_dir(item):
                seen.add(item)
                yield item


def is_nonempty_file(path: Path) -> bool:
    try:
        return path.is_file() and path.stat().st_size > 0
    except OSError:
        return False


def _is_dir(path: Path) -> bool:
    try:
        return path.is_dir()
    except OSError:
        return False


def _list_dirs(root: Path) -> List[Path]:
    try:
        return sorted((p for p in root.iterdir() if _is_dir(p)), key=lambda p: p.name)
    except OSError as exc:
        LOGGER.debug("Cannot list account root %s: %s", root, exc)
        return []
