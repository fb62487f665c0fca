# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Database backends for the script define scanner."""

from sdefs.database.sqlite import SQLitePreferenceStore

__all__ = ["SQLitePreferenceStore"]
