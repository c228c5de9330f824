"""
Entity Mapper - maps CSV rows to Kontent content items.

Derives the item name/codename of a row and builds the element payload of
each language variant.
"""
from __future__ import annotations

import re
from typing import List, Dict, Any

from .models import CsvRow, ItemIdentity


class EntityMapper:
    """
    Stateless mapper, all methods are static.

    The codename must depend only on (content_type, item_name): lookups
    of previous runs rely on it.
    """

    # Characters replaced by '_' in codenames
    CODENAME_SEPARATORS = re.compile(r"[- &]")

    TITLE_ELEMENT = "title"

    @staticmethod
    def item_name(row: CsvRow) -> str:
        """Value of the 'default' column, or Item_<n> when it is blank"""
        name = row.default_value.strip()
        return name or f"Item_{row.record_number}"

    @staticmethod
    def slugify(item_name: str) -> str:
        return EntityMapper.CODENAME_SEPARATORS.sub("_", item_name).lower()

    @staticmethod
    def item_codename(content_type: str, item_name: str) -> str:
        """
        Codename of the content item for a row.

        Example:
            item_codename("partner_list", "Acme Corp") -> "partner_list_acme_corp"
        """
        return f"{content_type}_{EntityMapper.slugify(item_name)}"

    @staticmethod
    def identity(row: CsvRow, content_type: str) -> ItemIdentity:
        name = EntityMapper.item_name(row)
        return ItemIdentity(name=name, codename=EntityMapper.item_codename(content_type, name))

    @staticmethod
    def map_elements(row: CsvRow, locale_code: str) -> List[Dict[str, Any]]:
        """
        Elements of the language variant for one locale.

        The title falls back to the 'default' column, then to an empty string.
        """
        value = row.get(locale_code) or row.default_value or ""
        return [
            {
                "element": {"codename": EntityMapper.TITLE_ELEMENT},
                "value": value,
            }
        ]
