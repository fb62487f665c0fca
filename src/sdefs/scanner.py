# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Project scanning for conditional compilation defines."""

import logging
import os
from pathlib import Path
from typing import Callable, Iterable

import pathspec

from sdefs.extractor import extract_symbols
from sdefs.model import ScanError, ScanResult

logger = logging.getLogger(__name__)

DEFAULT_MARKERS: tuple[str, ...] = ("#define ", "#if ")
DEFAULT_EXTENSIONS: tuple[str, ...] = (".cs",)
IGNORED_DEFINES: frozenset[str] = frozenset(
    {
        "true",
        "false",
        "DEBUG",
        "DEVELOPMENT_BUILD",
        "ENABLE_MONO",
        "ENABLE_IL2CPP",
        "ENABLE_DOTNET",
        "NETFX_CORE",
        "NET_2_0",
        "NET_2_0_SUBSET",
        "NET_4_6",
        "ENABLE_WINMD_SUPPORT",
    }
)
RESERVED_PREFIXES: tuple[str, ...] = ("UNITY_",)

ProgressCallback = Callable[[float, str], bool]


class ScanCancelledError(RuntimeError):
    """Represent a scan stopped by the progress callback."""


class DefineCollector:
    """Collect emitted symbol names into a scan result.

    Names on the ignore list and names starting with a reserved prefix are
    counted but not accepted.
    """

    def __init__(
        self,
        result: ScanResult,
        ignored_defines: Iterable[str] = IGNORED_DEFINES,
        reserved_prefixes: Iterable[str] = RESERVED_PREFIXES,
    ) -> None:
        """Initialize collector.

        Args:
            result: Scan result receiving accepted names.
            ignored_defines: Exact names to reject.
            reserved_prefixes: Name prefixes to reject.
        """
        self._result = result
        self._ignored_defines = frozenset(ignored_defines)
        self._reserved_prefixes = tuple(reserved_prefixes)

    def __call__(self, name: str) -> None:
        self._result.symbols_found += 1
        if name in self._ignored_defines or name.startswith(self._reserved_prefixes):
            logger.debug(f"Rejected reserved define (name={name})")
            return
        self._result.defines.add(name)


class IgnoreMatcher:
    """Match project paths against ignored path prefixes."""

    def __init__(self, spec: pathspec.GitIgnoreSpec) -> None:
        """Initialize matcher.

        Args:
            spec: Compiled gitignore matcher.
        """
        self._spec = spec

    @classmethod
    def from_ignored_paths(cls, ignored_paths: Iterable[str]) -> "IgnoreMatcher":
        """Build matcher from project-relative ignored paths.

        Every path is anchored to the project root, so ``Plugins/`` ignores
        ``<root>/Plugins`` but not ``<root>/Game/Plugins``.

        Args:
            ignored_paths: Ignored paths relative to the project root.

        Returns:
            Configured ignore matcher.
        """
        patterns = [
            _anchor_path(path) for path in ignored_paths if path and path.strip()
        ]
        return cls(spec=pathspec.GitIgnoreSpec.from_lines(patterns))

    def matches(self, relative_path: str, is_dir: bool) -> bool:
        """Check whether a path should be ignored.

        Args:
            relative_path: Project-relative POSIX path.
            is_dir: Whether the path is a directory.

        Returns:
            True when path should be ignored.
        """
        normalized = relative_path.replace(os.sep, "/").strip("/")
        if not normalized:
            return False
        if self._spec.match_file(normalized):
            return True
        if is_dir and self._spec.match_file(f"{normalized}/"):
            return True
        return False


class DefineScanner:
    """Scan project source files for conditional compilation defines."""

    def __init__(
        self,
        markers: Iterable[str] = DEFAULT_MARKERS,
        extensions: Iterable[str] = DEFAULT_EXTENSIONS,
        collector_factory: Callable[
            [ScanResult], Callable[[str], None]
        ] = DefineCollector,
    ) -> None:
        """Initialize scanner.

        Args:
            markers: Directive markers searched on every line, in order.
            extensions: File suffixes to scan; a missing leading dot is added.
            collector_factory: Builds the emit callback for a scan result.

        Raises:
            ValueError: If a marker or an extension is blank.
        """
        self._markers = tuple(markers)
        if not self._markers or any(not marker.strip() for marker in self._markers):
            raise ValueError(f"Markers must be non-blank: {list(self._markers)}")
        self._extensions = frozenset(_normalize_extension(ext) for ext in extensions)
        self._collector_factory = collector_factory

    def find_files(self, root_path: Path, ignored_paths: Iterable[str]) -> list[Path]:
        """List candidate source files beneath the root path.

        Args:
            root_path: Project root directory.
            ignored_paths: Ignored paths relative to the root.

        Returns:
            Sorted source files that are not ignored.
        """
        matcher = IgnoreMatcher.from_ignored_paths(ignored_paths)
        files: list[Path] = []
        for file_path in sorted(root_path.rglob("*")):
            if file_path.suffix.lower() not in self._extensions:
                continue
            if not file_path.is_file():
                continue
            relative_path = file_path.relative_to(root_path).as_posix()
            if matcher.matches(relative_path=relative_path, is_dir=False):
                logger.debug(f"Skipping ignored file (file_path={relative_path})")
                continue
            files.append(file_path)
        return files

    def scan(
        self,
        root_path: Path,
        ignored_paths: Iterable[str],
        result: ScanResult,
        progress: ProgressCallback | None = None,
    ) -> ScanResult:
        """Scan source files and collect define names into ``result``.

        Args:
            root_path: Project root directory.
            ignored_paths: Ignored paths relative to the root.
            result: Store to reset and fill.
            progress: Called before each file with the completed fraction and
                the file's relative path; returning ``False`` cancels.

        Returns:
            The filled ``result``.

        Raises:
            ScanCancelledError: If ``progress`` requests cancellation.
        """
        result.reset()
        emit = self._collector_factory(result)
        files = self.find_files(root_path=root_path, ignored_paths=ignored_paths)

        for index, file_path in enumerate(files):
            relative_path = file_path.relative_to(root_path).as_posix()
            if progress is not None and not progress(index / len(files), relative_path):
                logger.error(
                    f"User canceled (files_scanned={result.files_scanned} files_total={len(files)})"
                )
                raise ScanCancelledError("User canceled")
            try:
                self._scan_file(file_path=file_path, emit=emit)
            except OSError as exc:
                logger.warning(
                    f"Skipping file due to read failure (file_path={relative_path} error={exc})"
                )
                result.errors.append(
                    ScanError(file_path=relative_path, message=str(exc))
                )
                continue
            result.files_scanned += 1

        if progress is not None:
            progress(1.0, "")
        logger.info(
            f"Define scan completed (path={root_path} files={result.files_scanned} "
            f"defines={len(result.defines)} errors={len(result.errors)})"
        )
        return result

    def _scan_file(self, file_path: Path, emit: Callable[[str], None]) -> None:
        with file_path.open(encoding="utf-8", errors="replace") as stream:
            for line in stream:
                for marker in self._markers:
                    extract_symbols(line, marker, emit)


def _normalize_extension(extension: str) -> str:
    normalized = extension.strip().lower()
    if not normalized.lstrip("."):
        raise ValueError(f"Extension must be non-blank: {extension!r}")
    if not normalized.startswith("."):
        return f".{normalized}"
    return normalized


def _anchor_path(path: str) -> str:
    normalized = path.strip().replace("\\", "/")
    if normalized.startswith("/"):
        return normalized
    return f"/{normalized}"
