"""
Text Normalization Utilities.

Both sides of a match go through the same transforms here: pattern sources
when they are compiled and query strings before they are searched. Keeping
them in one place is what lets "Tribunal Dé Apelaciones" find a pattern
authored as "Tribunal de Apelaciones".

    ┌─────────────────┐                 ┌─────────────────┐
    │ Pattern Compiler│                 │ Candidate Match │
    │  fold_text()    │──── compare ───→│ normalize_query │
    └─────────────────┘                 └─────────────────┘

Functions
---------
**normalize_whitespace(text)**
    All whitespace runs become single spaces; ends trimmed.

**fold_text(text)**
    ASCII transliteration via Unidecode ("é" -> "e", "ß" -> "ss").

**normalize_query(text)**
    fold_text + normalize_whitespace + lower-case. The exact form the
    matcher searches and the exact-name fallback compares.

**read_lines(file_path)**
    Non-blank, stripped lines of a text file (place lists).
"""

import re
from pathlib import Path
from typing import List

from unidecode import unidecode

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_whitespace(text: str) -> str:
    """Normalize all whitespace to single spaces.

    Replaces ALL whitespace (including newlines, tabs) with single spaces
    and trims both ends.

    Args:
        text: The text to normalize

    Returns:
        Text with all whitespace normalized to single spaces

    Examples:
        >>> normalize_whitespace("Calhoun  County\\n Circuit Court ")
        'Calhoun County Circuit Court'
    """
    return _WHITESPACE_RE.sub(" ", text).strip()


def fold_text(text: str) -> str:
    """Transliterate text to its closest ASCII representation.

    Examples:
        >>> fold_text("Tribunal Dé Apelaciones")
        'Tribunal De Apelaciones'
    """
    return unidecode(text)


def normalize_query(text: str) -> str:
    """Normalize a query string for matching.

    Examples:
        >>> normalize_query("  Tribunal  Dé Apelaciones ")
        'tribunal de apelaciones'
    """
    return normalize_whitespace(fold_text(text)).lower()


def read_lines(file_path: Path) -> List[str]:
    """Read the non-blank lines of a UTF-8 text file, stripped.

    Args:
        file_path: Path to the text file

    Returns:
        List of lines with surrounding whitespace removed

    Raises:
        FileNotFoundError: If the file does not exist
    """
    content = file_path.read_text(encoding="utf-8-sig")
    return [line.strip() for line in content.splitlines() if line.strip()]
