"""Host page access for the thread collector.

The collector only sees the ThreadHost protocol; PlaywrightThreadHost is the
live implementation over an async Playwright page.
"""
from __future__ import annotations

import logging
from typing import List, Protocol

from src.scrapers.selector_registry import get_selectors
from src.utils.exceptions import HostUnavailableError

logger = logging.getLogger(__name__)


class ThreadHost(Protocol):
    @property
    def url(self) -> str:
        ...

    async def item_snapshots(self) -> List[str]:
        """outerHTML of every item element currently in the tree, document order."""
        ...

    async def scroll_to_bottom(self) -> None:
        ...

    async def content_height(self) -> int:
        ...

    async def page_text(self) -> str:
        ...


_SNAPSHOT_JS = '''
(selector) => Array.from(document.querySelectorAll(selector)).map(el => el.outerHTML)
'''


class PlaywrightThreadHost:
    """ThreadHost backed by a playwright.async_api.Page."""

    def __init__(self, page, item_selector: str | None = None):
        self.page = page
        self.item_selector = item_selector or ', '.join(get_selectors('x', 'thread.item'))

    @property
    def url(self) -> str:
        return self.page.url

    async def item_snapshots(self) -> List[str]:
        # evaluate en lote: one round-trip per scan instead of one per element
        try:
            data = await self.page.evaluate(_SNAPSHOT_JS, self.item_selector)
        except Exception as e:
            raise HostUnavailableError('item_snapshots', str(e)) from e
        return [h for h in (data or []) if isinstance(h, str)]

    async def scroll_to_bottom(self) -> None:
        try:
            await self.page.evaluate('window.scrollTo(0, document.body.scrollHeight)')
        except Exception as e:
            raise HostUnavailableError('scroll_to_bottom', str(e)) from e

    async def content_height(self) -> int:
        try:
            return int(await self.page.evaluate('document.body.scrollHeight') or 0)
        except Exception as e:
            raise HostUnavailableError('content_height', str(e)) from e

    async def page_text(self) -> str:
        try:
            return await self.page.evaluate('document.body.textContent || ""') or ''
        except Exception as e:
            raise HostUnavailableError('page_text', str(e)) from e

    async def wait_for_items(self, timeout_ms: int = 8000) -> bool:
        """Wait until at least one item renders; False when the page shows none."""
        try:
            await self.page.wait_for_selector(self.item_selector, timeout=timeout_ms)
            return True
        except Exception:
            logger.info(f"x.thread.host no_items_after_ms={timeout_ms} url={self.url}")
            return False
