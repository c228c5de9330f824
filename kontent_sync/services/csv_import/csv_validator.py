"""
CSV Validator.

First pass over the uploaded file: checks the locale headers and that
there is something to import, before any call to Kontent is made.
"""
from __future__ import annotations

import csv
import logging
from typing import List, Optional

from .models import ValidationResult
from kontent_sync.core.exceptions import MissingHeadersError, EmptyDataError, CsvReadError
from kontent_sync.core.locales import locale_codes

logger = logging.getLogger(__name__)


class CSVValidator:
    """
    Validate an uploaded CSV file against the configured locales.

    Each call opens and closes its own handle.
    """

    def __init__(self, locales: Optional[List[str]] = None):
        self.locales = list(locales) if locales is not None else locale_codes()

    def validate(self, file_path: str) -> ValidationResult:
        """
        Stream the file once and check its structure.

        Args:
            file_path: Path of the CSV on local disk

        Returns:
            ValidationResult with the trimmed headers

        Raises:
            MissingHeadersError: A locale column is absent from the header
            EmptyDataError: No data row follows the header
            CsvReadError: The file could not be read or parsed
        """
        headers: List[str] = []
        has_data = False

        try:
            # utf-8-sig strips the BOM Excel adds
            with open(file_path, newline='', encoding='utf-8-sig') as csv_file:
                reader = csv.reader(csv_file)
                for record in reader:
                    if not headers:
                        if not any(cell.strip() for cell in record):
                            continue
                        headers = [cell.strip() for cell in record]
                        continue
                    if any(cell.strip() for cell in record):
                        has_data = True
                        break
        except (OSError, UnicodeDecodeError, csv.Error) as e:
            logger.error(f"Failed reading CSV {file_path}: {e}")
            raise CsvReadError(file_path, e)

        header_set = set(headers)
        missing = [locale for locale in self.locales if locale not in header_set]
        if missing:
            logger.warning(f"CSV {file_path} is missing headers: {missing}")
            raise MissingHeadersError(missing)

        if not has_data:
            logger.warning(f"CSV {file_path} has no data rows")
            raise EmptyDataError()

        if headers[:len(self.locales)] != self.locales:
            # Rows are read positionally, so a different column order shifts values between locales
            logger.warning(
                f"CSV header order {headers} differs from locale order {self.locales}; "
                f"columns are assigned by position"
            )

        logger.info(f"CSV {file_path} validated: headers={headers}")
        return ValidationResult(file_path=str(file_path), headers=tuple(headers), has_data=has_data)
