"""
Shared Utilities.

Text transforms used on both sides of a match: pattern sources when they
are compiled and query strings before they are searched.

Architecture Position
---------------------
    ┌─────────────────────────────────────────┐
    │      Registry (courtsdb.registry)       │
    ├─────────────────────────────────────────┤
    │          ★ Shared (text_utils) ★        │  <- You are here
    ├─────────────────────────────────────────┤
    │              Core (courtsdb.core)       │
    └─────────────────────────────────────────┘

Usage Example
-------------
    from courtsdb.shared import normalize_query
    normalize_query("  Tribunal Dé  Apelaciones ")
    # 'tribunal de apelaciones'
"""

from courtsdb.shared.text_utils import (
    fold_text,
    normalize_query,
    normalize_whitespace,
    read_lines,
)

__all__ = [
    "fold_text",
    "normalize_query",
    "normalize_whitespace",
    "read_lines",
]
