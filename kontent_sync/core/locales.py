"""
Static locale definitions.

Key   = locale code, also the CSV column name (in column order)
Value = Kontent.ai language codename the variant is written to
"""
from typing import Dict, List, Optional

DEFAULT_LOCALE = "default"

LOCALE_MAP: Dict[str, str] = {
    "default": "default",
    "zh-HK": "zh-HK",
    "zh-TW": "zh-TW",
    "ko-KR": "ko-KR",
    "ja-JP": "ja-JP",
    "es-MX": "es-MX",
}


def locale_codes() -> List[str]:
    """Locale codes in CSV column order"""
    return list(LOCALE_MAP.keys())


def get_language_id(locale_code: str) -> Optional[str]:
    """Kontent language codename for a locale, or None when it is not mapped"""
    return LOCALE_MAP.get(locale_code) or None
