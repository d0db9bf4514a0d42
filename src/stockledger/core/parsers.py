"""
Reusable parsers for raw spreadsheet cells.

These parsers handle the messy reality of shop exports:
- Prices typed with thousands separators, NBSP and currency signs ("1 200,50 ₴")
- Article codes that Excel turned into floats (12345.0)
- Owner columns filled in free text ("мій", "батько", "50/50")
- Several date formats, or real datetimes, in the same column

None of them raise on bad input: a malformed cell degrades to a safe
default so one typo cannot abort a whole batch.
"""

import re
from datetime import date, datetime, time
from numbers import Number
from typing import Iterable

import pandas as pd

from ..config import PipelineSettings
from .models import OwnerTag

_AMOUNT_JUNK = re.compile(r"[^0-9.,\-]")
_WHITESPACE = re.compile(r"\s+")


def _is_missing(value) -> bool:
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def parse_amount_or_none(raw) -> float | None:
    """
    Parse a money or quantity cell, returning None when it is missing or unparseable.

    Cleaning: drop all whitespace (NBSP included), keep only digits, '.', ','
    and '-', then read the first comma as the decimal point.
    """
    if _is_missing(raw) or isinstance(raw, bool):
        return None

    if isinstance(raw, Number):
        return float(raw)

    cleaned = _WHITESPACE.sub("", str(raw))
    cleaned = _AMOUNT_JUNK.sub("", cleaned)
    if not cleaned:
        return None

    cleaned = cleaned.replace(",", ".", 1)
    try:
        return float(cleaned)
    except ValueError:
        return None


def parse_amount(raw) -> float:
    """Parse a money or quantity cell; missing and malformed cells both give 0."""
    value = parse_amount_or_none(raw)
    return 0.0 if value is None else value


def parse_quantity(raw) -> int:
    """Parse a unit count, rounding and clamping at zero."""
    return max(0, int(round(parse_amount(raw))))


def clean_text(raw) -> str | None:
    """Return a stripped string, or None for blank/NaN cells."""
    if _is_missing(raw):
        return None

    if isinstance(raw, float) and raw.is_integer():
        raw = int(raw)

    text = str(raw).strip()
    return text or None


def normalize_match_key(raw) -> str:
    """
    Reduce a product name or article to lower-case letters and digits.

    "Жало T12-BC2 (new)" -> "жалоt12bc2new"
    """
    text = clean_text(raw)
    if text is None:
        return ""
    return "".join(ch for ch in text.lower() if ch.isalnum())


class OwnerTagResolver:
    """
    Maps a free-text owner cell to an OwnerTag.

    Mine markers are checked before Other markers; first match wins.
    Anything unrecognised, including an empty cell, is Shared.
    """

    def __init__(self, mine_markers: Iterable[str], other_markers: Iterable[str]):
        self.mine_markers = tuple(m.lower() for m in mine_markers if m)
        self.other_markers = tuple(m.lower() for m in other_markers if m)

    def resolve(self, raw) -> OwnerTag:
        text = clean_text(raw)
        if text is None:
            return OwnerTag.SHARED

        text = text.lower()
        if any(marker in text for marker in self.mine_markers):
            return OwnerTag.MINE
        if any(marker in text for marker in self.other_markers):
            return OwnerTag.OTHER
        return OwnerTag.SHARED

    def is_recognised(self, raw) -> bool:
        """True when the cell is empty or names an owner via a marker."""
        text = clean_text(raw)
        if text is None:
            return True
        text = text.lower()
        return any(m in text for m in self.mine_markers + self.other_markers)


def resolve_owner_tag(
    raw,
    mine_markers: Iterable[str] | None = None,
    other_markers: Iterable[str] | None = None,
) -> OwnerTag:
    """Resolve an owner cell using the given markers, or the configured defaults."""
    if mine_markers is None or other_markers is None:
        defaults = PipelineSettings()
        mine_markers = defaults.mine_markers if mine_markers is None else mine_markers
        other_markers = defaults.other_markers if other_markers is None else other_markers

    return OwnerTagResolver(mine_markers, other_markers).resolve(raw)


class DateParser:
    """
    Robust date parser that handles multiple formats commonly found in order exports.

    Real datetime cells (what pandas hands back for Excel dates) pass through.
    To extend: Add new format patterns to DATE_FORMATS.
    """

    # Common date formats found in order exports, ordered by specificity
    DATE_FORMATS = [
        "%Y-%m-%d %H:%M:%S",  # ISO with time: 2024-07-25 14:03:00
        "%Y-%m-%d",           # ISO: 2024-07-25
        "%d.%m.%Y %H:%M",     # CIS with time: 25.07.2024 14:03
        "%d.%m.%Y",           # CIS: 25.07.2024
        "%d.%m.%y",           # CIS short: 25.07.24
        "%d/%m/%Y",           # EU slash: 25/07/2024
        "%m/%d/%Y",           # US: 07/25/2024
    ]

    def __init__(self, custom_formats: list[str] | None = None):
        """
        Args:
            custom_formats: Additional date formats to try (prepended to defaults)
        """
        self.formats = (custom_formats or []) + self.DATE_FORMATS
        self._cache: dict[str, datetime | None] = {}

    def parse(self, value) -> datetime | None:
        """Parse a date cell, trying multiple formats."""
        if _is_missing(value):
            return None

        if isinstance(value, pd.Timestamp):
            return value.to_pydatetime()
        if isinstance(value, datetime):
            return value
        if isinstance(value, date):
            return datetime.combine(value, time())

        date_str = str(value).strip()
        if not date_str:
            return None

        if date_str in self._cache:
            return self._cache[date_str]

        for fmt in self.formats:
            try:
                result = datetime.strptime(date_str, fmt)
                self._cache[date_str] = result
                return result
            except ValueError:
                continue

        self._cache[date_str] = None
        return None
