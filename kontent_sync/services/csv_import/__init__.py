"""
CSV import: validation, parsing and row to item mapping
"""

from .csv_validator import CSVValidator
from .csv_parser import parse_rows
from .entity_mapper import EntityMapper

__all__ = ['CSVValidator', 'parse_rows', 'EntityMapper']
