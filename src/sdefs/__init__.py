# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Public import surface for script define scanning components."""

from sdefs.extractor import extract_symbols
from sdefs.model import ScanError, ScanResult
from sdefs.scanner import DefineCollector, DefineScanner, ScanCancelledError

__all__ = [
    "DefineCollector",
    "DefineScanner",
    "ScanCancelledError",
    "ScanError",
    "ScanResult",
    "extract_symbols",
]
