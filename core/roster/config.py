"""
Centralised configuration for the roster merge pipeline.

Regex patterns, sentinel strings, utility-sheet names and other tunables
live here so that the rest of the code can stay free of hard-coded values.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import FrozenSet


# ---------------------------------------------------------------------------
# Pre-compiled regex patterns (shared across modules)
# ---------------------------------------------------------------------------

# 6+ digits, optionally separated by spaces / dashes / parentheses,
# optionally led by "+".
PHONE_RE = re.compile(r"\+?\(?\d(?:[\s\-()]*\d){5,}\)?")
EMAIL_RE = re.compile(r"[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}", re.IGNORECASE)
LINK_SCHEME_RE = re.compile(r"^\s*(?:mailto|tel):", re.IGNORECASE)
DIGIT_RE = re.compile(r"\d")
LETTER_RE = re.compile(r"[^\W\d_]")
HEADER_PUNCT_RE = re.compile(r"[^\w ]")
WHITESPACE_RE = re.compile(r"\s+")


# ---------------------------------------------------------------------------
# Keyword constants
# ---------------------------------------------------------------------------

# Values that mean "absent" rather than data (compared case-insensitively).
ABSENT_VALUES: FrozenSet[str] = frozenset({"", "nan", "none", "null", "0"})

UTILITY_SHEET_NAMES: FrozenSet[str] = frozenset({"template", "format", "example", "blank"})

UNKNOWN_BATCH = "Unknown Batch"
UNKNOWN_COHORT = "Unknown Year"


# ---------------------------------------------------------------------------
# MergeConfig: tunable thresholds
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MergeConfig:
    """Immutable bag of tunables used throughout the merge."""

    # Identifier column marker; locates the header row and gates validity.
    sentinel: str = "USN"

    # Identifier-looking value: at least this long, with a digit and a letter.
    identifier_min_length: int = 6

    # Leftover default tabs ("Sheet2", "Sheet3", ...) are utility sheets;
    # the first default name is kept because single-sheet files use it.
    default_sheet_prefix: str = "Sheet"
    default_sheet_keep: str = "Sheet1"
    utility_sheet_names: FrozenSet[str] = UTILITY_SHEET_NAMES

    # Rendering of date cells.
    date_format: str = "%d/%m/%Y"


# Singleton default config
DEFAULT_CONFIG = MergeConfig()
