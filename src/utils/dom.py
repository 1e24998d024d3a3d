from typing import List, Optional
import logging

from bs4 import BeautifulSoup, Tag

logger = logging.getLogger(__name__)


def parse_fragment(html: str) -> Optional[Tag]:
    """Parse a serialized element and return its root tag (None when there is none)."""
    soup = BeautifulSoup(html, 'html.parser')
    return soup.find(True)


def safe_text(el) -> Optional[str]:
    try:
        if el is None:
            return None
        txt = el.get_text()
        return (txt or "").strip() or None
    except Exception:
        return None


def safe_attr(el, name: str) -> Optional[str]:
    try:
        if el is None:
            return None
        val = el.get(name)
        if isinstance(val, list):
            val = ' '.join(val)
        return val
    except Exception:
        return None


def select_first(root, selectors: List[str]):
    """Return the first element matched by any of the selectors, in order."""
    for sel in selectors:
        try:
            el = root.select_one(sel)
            if el is not None:
                return el
        except Exception as e:
            logger.debug("dom.select_first bad selector=%s err=%s", sel, e)
            continue
    return None


def select_all_first(root, selectors: List[str]) -> List[Tag]:
    """Return first non-empty list of elements found for the given selectors array."""
    for sel in selectors:
        try:
            els = root.select(sel)
            if els:
                return els
        except Exception as e:
            logger.debug("dom.select_all_first bad selector=%s err=%s", sel, e)
            continue
    return []
