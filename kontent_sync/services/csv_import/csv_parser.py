"""
CSV Parser for the processing pass.

Reads the file without trusting its header: columns are named after the
configured locales by position and the header record is skipped.
"""
from __future__ import annotations

import csv
import logging
from typing import Iterator, List, Optional

from .models import CsvRow
from kontent_sync.core.exceptions import CsvReadError
from kontent_sync.core.locales import locale_codes

logger = logging.getLogger(__name__)


def parse_rows(file_path: str, locales: Optional[List[str]] = None) -> Iterator[CsvRow]:
    """
    Lazily yield the data rows of a CSV file.

    The generator owns its file handle for the duration of the pass; a
    second pass needs a new call.

    Args:
        file_path: Path of the CSV on local disk
        locales: Column names to assign by position (default: configured locales)

    Yields:
        CsvRow with a value (possibly empty) for every locale

    Raises:
        CsvReadError: The file could not be read or parsed
    """
    columns = list(locales) if locales is not None else locale_codes()
    header_seen = False
    yielded = 0

    try:
        with open(file_path, newline='', encoding='utf-8-sig') as csv_file:
            reader = csv.reader(csv_file)
            for record_number, record in enumerate(reader, start=1):
                if not any(cell.strip() for cell in record):
                    continue
                if not header_seen:
                    header_seen = True
                    continue

                values = {
                    locale: record[position].strip() if position < len(record) else ""
                    for position, locale in enumerate(columns)
                }
                yielded += 1
                yield CsvRow(record_number=record_number, values=values)
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        logger.error(f"Failed reading CSV {file_path} after {yielded} rows: {e}")
        raise CsvReadError(file_path, e)

    logger.info(f"Parsed {yielded} rows from {file_path}")
