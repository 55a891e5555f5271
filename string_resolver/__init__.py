"""
String Resolver - merge localized string documents into per-platform tables.

Features:
- Platform filtering (ios, android, all)
- Semantic version gating of individual values
- Fail-fast conflict detection across content sources
- Per-culture tables with base-culture fallback
- Platform/version-aware diffs between two content sets
"""

from .changes import change_detail, compute_changes
from .errors import (
    ConflictError,
    DuplicateError,
    MissingBaseValueError,
    StringResolverError,
    ValidationError,
)
from .resolver import EntryMerger

__version__ = "1.0.0"

__all__ = [
    "EntryMerger",
    "change_detail",
    "compute_changes",
    "StringResolverError",
    "ValidationError",
    "ConflictError",
    "DuplicateError",
    "MissingBaseValueError",
]
