# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Domain models for define scan results."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ScanError:
    """Represent a scan error for one file."""

    file_path: str
    message: str


@dataclass
class ScanResult:
    """Accumulate the outcome of one define scan.

    Attributes:
        defines: Accepted symbol names.
        files_scanned: Number of files read to completion.
        symbols_found: Number of names emitted before filtering.
        errors: Recoverable per-file read failures.
    """

    defines: set[str] = field(default_factory=set)
    files_scanned: int = 0
    symbols_found: int = 0
    errors: list[ScanError] = field(default_factory=list)

    def reset(self) -> None:
        """Clear all accumulated values."""
        self.defines.clear()
        self.files_scanned = 0
        self.symbols_found = 0
        self.errors.clear()

    def sorted_defines(self) -> list[str]:
        """Return accepted symbol names in sorted order."""
        return sorted(self.defines)
