# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Preference storage contracts and the define editor preferences."""

import logging
from typing import Iterable, Protocol

from sdefs.build_target import (
    DEFAULT_BUILD_TARGET,
    BuildTarget,
    BuildTargetGroup,
    parse_build_target,
)
from sdefs.defines import format_define_list, parse_define_list

logger = logging.getLogger(__name__)

CACHED_DEFINES_KEY = "CachedPreprocessorDefines"
IGNORED_PATHS_KEY = "PreprocessorDefinesIgnoredPaths"
ACTIVE_BUILD_TARGET_KEY = "ActiveBuildTarget"
ENABLED_DEFINES_KEY_PREFIX = "ScriptingDefineSymbols/"
DEFAULT_IGNORED_PATHS = "WebPlayerTemplates/"
LIST_SEPARATOR = "\n"


class PreferencesError(RuntimeError):
    """Represent a fatal preference store failure."""


class PreferenceStore(Protocol):
    """Define the contract for a string key-value preference store."""

    def get_string(self, key: str, default: str = "") -> str:
        """Return the stored value for ``key`` or ``default``."""

    def set_string(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``."""


class Preferences:
    """Read and write define editor settings through a preference store."""

    def __init__(self, store: PreferenceStore) -> None:
        """Initialize preferences and load the ignored paths.

        Args:
            store: Backing key-value store.

        Raises:
            PreferencesError: If the store cannot be read.
        """
        self._store = store
        self._ignored_paths = parse_define_list(
            store.get_string(IGNORED_PATHS_KEY, DEFAULT_IGNORED_PATHS),
            separator=LIST_SEPARATOR,
        )

    def cached_defines(self) -> list[str]:
        """Return the defines found by the last completed scan."""
        return parse_define_list(
            self._store.get_string(CACHED_DEFINES_KEY, ""), separator=LIST_SEPARATOR
        )

    def set_cached_defines(self, names: Iterable[str]) -> None:
        """Replace the cached scan result.

        Args:
            names: Define names; an empty collection clears the cache.
        """
        self._store.set_string(
            CACHED_DEFINES_KEY, format_define_list(names, separator=LIST_SEPARATOR)
        )

    def ignored_paths(self) -> list[str]:
        return list(self._ignored_paths)

    def ignore_path(self, path: str) -> bool:
        """Add a project-relative path to the ignore list.

        Args:
            path: Path to ignore.

        Returns:
            True when the list changed.
        """
        path = path.strip()
        if not path or path in self._ignored_paths:
            return False
        self._ignored_paths.append(path)
        self._save_ignored_paths()
        return True

    def unignore_path(self, path: str) -> bool:
        """Remove a path from the ignore list.

        Args:
            path: Path to stop ignoring.

        Returns:
            True when the list changed.
        """
        path = path.strip()
        if path not in self._ignored_paths:
            return False
        self._ignored_paths.remove(path)
        self._save_ignored_paths()
        return True

    def active_build_target(self) -> BuildTarget:
        """Return the active build target.

        Unknown stored values fall back to the default target.
        """
        stored = self._store.get_string(
            ACTIVE_BUILD_TARGET_KEY, DEFAULT_BUILD_TARGET.value
        )
        try:
            return parse_build_target(stored)
        except ValueError:
            logger.warning(
                f"Stored build target is unknown; using default (stored={stored} default={DEFAULT_BUILD_TARGET.value})"
            )
            return DEFAULT_BUILD_TARGET

    def set_active_build_target(self, target: BuildTarget) -> None:
        self._store.set_string(ACTIVE_BUILD_TARGET_KEY, target.value)

    def enabled_defines(self, group: BuildTargetGroup) -> list[str]:
        """Return the enabled define names of a build target group."""
        return parse_define_list(self._store.get_string(_enabled_key(group), ""))

    def set_enabled_defines(
        self, group: BuildTargetGroup, names: Iterable[str]
    ) -> bool:
        """Store the enabled define names of a build target group.

        Args:
            group: Build target group.
            names: Enabled define names in order.

        Returns:
            False when the stored value was already identical and nothing was
            written.
        """
        key = _enabled_key(group)
        value = format_define_list(names)
        if value == self._store.get_string(key, ""):
            logger.debug(f"Enabled defines unchanged (group={group.value})")
            return False
        self._store.set_string(key, value)
        logger.info(f"Enabled defines updated (group={group.value} defines={value})")
        return True

    def _save_ignored_paths(self) -> None:
        self._store.set_string(
            IGNORED_PATHS_KEY,
            format_define_list(self._ignored_paths, separator=LIST_SEPARATOR),
        )


def _enabled_key(group: BuildTargetGroup) -> str:
    return f"{ENABLED_DEFINES_KEY_PREFIX}{group.value}"
