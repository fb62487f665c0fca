# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Enabled define lists and pending toggle changes."""

import logging
from dataclasses import dataclass, field
from typing import Iterable

logger = logging.getLogger(__name__)

DEFINE_SEPARATOR = ";"


def parse_define_list(text: str, separator: str = DEFINE_SEPARATOR) -> list[str]:
    """Split a delimited define string into names.

    Args:
        text: Delimited define string.
        separator: Delimiter between names.

    Returns:
        Names in stored order, without blanks.
    """
    return [part.strip() for part in text.split(separator) if part.strip()]


def format_define_list(names: Iterable[str], separator: str = DEFINE_SEPARATOR) -> str:
    """Join define names into a delimited string."""
    return separator.join(names)


@dataclass
class PendingChanges:
    """Track define toggles that have not been applied yet.

    Attributes:
        to_enable: Names to add on apply, in toggle order.
        to_disable: Names to remove on apply, in toggle order.
    """

    to_enable: list[str] = field(default_factory=list)
    to_disable: list[str] = field(default_factory=list)

    @property
    def change_count(self) -> int:
        return len(self.to_enable) + len(self.to_disable)

    def enable(self, name: str) -> None:
        if name not in self.to_enable:
            self.to_enable.append(name)
        if name in self.to_disable:
            self.to_disable.remove(name)

    def disable(self, name: str) -> None:
        if name not in self.to_disable:
            self.to_disable.append(name)
        if name in self.to_enable:
            self.to_enable.remove(name)

    def toggle(self, name: str, enabled: Iterable[str]) -> bool:
        """Flip the effective state of one define.

        Args:
            name: Define name.
            enabled: Currently stored enabled defines.

        Returns:
            The new effective state.
        """
        if self.is_set(name, enabled):
            self.disable(name)
            return False
        self.enable(name)
        return True

    def clear(self) -> None:
        self.to_enable.clear()
        self.to_disable.clear()

    def is_set(self, name: str, enabled: Iterable[str]) -> bool:
        """Return whether a define is effectively enabled.

        Args:
            name: Define name.
            enabled: Currently stored enabled defines.

        Returns:
            True when the define is stored or pending enable, and not pending
            disable.
        """
        if name in self.to_disable:
            return False
        return name in set(enabled) or name in self.to_enable

    def is_modified(self, name: str) -> bool:
        return name in self.to_enable or name in self.to_disable

    def apply(self, enabled: Iterable[str]) -> list[str]:
        """Apply pending changes to the stored enabled defines.

        Pending changes are cleared afterwards.

        Args:
            enabled: Currently stored enabled defines.

        Returns:
            New enabled defines: stored order first, then newly enabled names.
        """
        disabled = set(self.to_disable)
        result = [name for name in enabled if name not in disabled]
        for name in self.to_enable:
            if name not in result:
                result.append(name)
        logger.debug(
            f"Applied pending define changes (enabled={len(self.to_enable)} disabled={len(self.to_disable)})"
        )
        self.clear()
        return result
