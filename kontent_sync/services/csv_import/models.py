"""
Data models for CSV Import.

Immutable dataclasses describing the uploaded file and its rows.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Tuple

from kontent_sync.core.locales import DEFAULT_LOCALE


@dataclass(frozen=True)
class CsvRow:
    """
    One data row of the uploaded CSV.

    Attributes:
        record_number: 1-based position of the record in the file (header = 1)
        values: locale code -> cell value, one key per configured locale
    """
    record_number: int
    values: Dict[str, str] = field(default_factory=dict)

    def get(self, locale_code: str) -> str:
        return self.values.get(locale_code, "")

    @property
    def default_value(self) -> str:
        return self.get(DEFAULT_LOCALE)


@dataclass(frozen=True)
class ValidationResult:
    """
    Result of the validation pass.

    Attributes:
        file_path: Validated file
        headers: Trimmed header names in file order
        has_data: Whether at least one data row follows the header
    """
    file_path: str
    headers: Tuple[str, ...]
    has_data: bool


@dataclass(frozen=True)
class ItemIdentity:
    """Name and codename of the content item a row is synced to"""
    name: str
    codename: str
