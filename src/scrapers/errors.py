"""Definición de códigos de error y utilidades de clasificación.

Los códigos buscan ser estables y consumibles por capas superiores.
"""
from enum import Enum
from typing import Iterable, Optional

from src.scrapers.selector_registry import text_indicators

class ErrorCode(str, Enum):
    NOT_FOUND = "NOT_FOUND"
    PRIVATE = "PRIVATE"
    LOGIN_REQUIRED = "LOGIN_REQUIRED"
    MALFORMED_ITEM = "MALFORMED_ITEM"
    EARLY_EXIT = "EARLY_EXIT"
    HOST_UNAVAILABLE = "HOST_UNAVAILABLE"

def classify_page_state(platform: str, text_content: str) -> ErrorCode | None:
    low = (text_content or '').lower()
    for kw in text_indicators(platform, 'private_indicators'):
        if kw.lower() in low:
            return ErrorCode.PRIVATE
    for kw in text_indicators(platform, 'login_indicators'):
        if kw.lower() in low:
            return ErrorCode.LOGIN_REQUIRED
    return None

def detect_early_exit(text_content: str, indicators: Optional[Iterable[str]] = None, platform: str = 'x') -> Optional[str]:
    """Return the first suppression banner found in the page text, if any.

    Matching is case-sensitive, same as the rendered button labels.
    """
    if not text_content:
        return None
    if indicators is None:
        indicators = text_indicators(platform, 'early_exit_indicators')
    for kw in indicators:
        if kw and kw in text_content:
            return kw
    return None
