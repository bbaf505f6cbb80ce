"""
Browser profile discovery.

Turns (browser, all_users) into the list of history databases to read. One
inaccessible user, root or profile never stops discovery for the others.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Dict, List, Optional

from core.enums import Browser
from core.logging import get_logger
from core.models import ProfileLocation, UserContext
from extractors.browser_patterns import get_history_filename, get_profile_layout

from .path_utils import PlatformLayout, enumerate_browser_profiles, get_platform_layout, is_nonempty_file

LOGGER = get_logger("extractors.profile_locator")

FULL_DISK_ACCESS_HINT = (
    "Grant Full Disk Access to the terminal running the scan "
    "(System Settings > Privacy & Security > Full Disk Access)."
)


def discover_chromium_profiles(base: Path, user: UserContext, history_file: str) -> List[ProfileLocation]:
    """``Default`` and ``Profile *`` directories that contain a history file."""
    locations = []
    for profile_dir in enumerate_browser_profiles(base, ["Default", "Profile *"]):
        history = profile_dir / history_file
        if is_nonempty_file(history):
            locations.append(ProfileLocation(user.username, profile_dir.name, history))
    return locations


def discover_firefox_profiles(base: Path, user: UserContext, history_file: str) -> List[ProfileLocation]:
    """Any profile directory (random prefixed names) holding places.sqlite."""
    locations = []
    for profile_dir in enumerate_browser_profiles(base, ["*"]):
        history = profile_dir / history_file
        if is_nonempty_file(history):
            locations.append(ProfileLocation(user.username, profile_dir.name, history))
    return locations


def discover_safari_profile(base: Path, user: UserContext, history_file: str) -> List[ProfileLocation]:
    """
    The single Safari history database of a user.

    macOS refuses to list ~/Library/Safari without Full Disk Access; that
    surfaces as PermissionError here and is reported as an advisory.
    """
    if not base.is_dir():
        return []
    try:
        os.listdir(base)
    except PermissionError:
        LOGGER.warning("Safari data for %s is not readable (%s). %s",
                       user.username, base, FULL_DISK_ACCESS_HINT)
        return []

    history = base / history_file
    if not is_nonempty_file(history):
        return []
    return [ProfileLocation(user.username, "Default", history)]


DISCOVERY_FUNCTIONS: Dict[str, Callable[[Path, UserContext, str], List[ProfileLocation]]] = {
    "chromium": discover_chromium_profiles,
    "firefox": discover_firefox_profiles,
    "safari": discover_safari_profile,
}


class ProfileLocator:
    """Finds history databases for a browser, for one or all local users."""

    def __init__(self, layout: Optional[PlatformLayout] = None) -> None:
        self.layout = layout or get_platform_layout()

    def users(self, all_users: bool) -> List[UserContext]:
        if all_users:
            return self.layout.list_user_accounts()
        return [self.layout.current_user()]

    def locate_profiles(self, browser: Browser, all_users: bool = False) -> List[ProfileLocation]:
        """
        Locate history databases for a browser.

        Args:
            browser: Browser to locate
            all_users: Enumerate every local account instead of the invoking user

        Returns:
            ProfileLocation list sorted by (username, profile, path); empty when
            the browser is not supported on this platform or nothing was found
        """
        discover = DISCOVERY_FUNCTIONS[get_profile_layout(browser)]
        history_file = get_history_filename(browser)

        found: Dict[Path, ProfileLocation] = {}
        for user in self.users(all_users):
            for base in self.layout.browser_base_paths(browser, user):
                try:
                    locations = discover(base, user, history_file)
                except OSError as exc:
                    LOGGER.debug("Skipping %s data for %s at %s: %s",
                                 browser.display_name, user.username, base, exc)
                    continue
                for location in locations:
                    found.setdefault(location.history_path, location)

        profiles = sorted(
            found.values(),
            key=lambda loc: (loc.username.lower(), loc.profile_name, str(loc.history_path)),
        )
        LOGGER.debug("Located %d %s profile(s) (all_users=%s)",
                     len(profiles), browser.display_name, all_users)
        return profiles
