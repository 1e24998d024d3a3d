"""Extract a ThreadRecord from one rendered tweet element.

Every step is optional: a missing block leaves its field empty. Only a payload
without any element raises (MalformedItemError), and the collector skips it.
"""
from __future__ import annotations

import logging
import re
from typing import Dict, Optional, Tuple

from bs4 import Tag

from src.scrapers.selector_registry import get_selectors
from src.scrapers.types import MetricName, QuotedRecord, ThreadRecord
from src.scrapers.x.rich_text import DEFAULT_MAX_DEPTH, render_inline
from src.utils.dom import parse_fragment, safe_attr, safe_text, select_all_first, select_first
from src.utils.exceptions import MalformedItemError
from src.utils.url import absolute_url

logger = logging.getLogger(__name__)

_HANDLE_HREF_RE = re.compile(r'^/([A-Za-z0-9_]+)$')
_MENTION_RE = re.compile(r'@[A-Za-z0-9_]+')
# "1.2K Likes. Like", "12 replies", "3,456 views. View post analytics"
_COUNT_LABEL_RE = re.compile(r'^\s*(?P<count>\d[\d.,]*[KMB]?)\s+(?P<category>[A-Za-z]+)')

_CATEGORY_PREFIXES: Tuple[Tuple[str, MetricName], ...] = (
    ('repl', 'replies'),
    ('repost', 'reposts'),
    ('retweet', 'reposts'),
    ('like', 'likes'),
    ('bookmark', 'bookmarks'),
    ('view', 'views'),
)


def _sel(category: str):
    return get_selectors('x', f"thread.{category}")


def extract_html(html: str, max_depth: int = DEFAULT_MAX_DEPTH) -> ThreadRecord:
    """Parse a serialized item (outerHTML) and extract it."""
    if not isinstance(html, str) or not html.strip():
        raise MalformedItemError("Snapshot vacío o no textual")
    root = parse_fragment(html)
    if root is None:
        raise MalformedItemError("Snapshot sin elementos", snippet=html)
    return extract(root, max_depth=max_depth)


def extract(item_root: Tag, max_depth: int = DEFAULT_MAX_DEPTH) -> ThreadRecord:
    if not isinstance(item_root, Tag):
        raise MalformedItemError(f"Raíz de item inválida: {type(item_root).__name__}")

    display_name, handle, timestamp, permalink = _extract_author(item_root)

    quoted = select_first(item_root, _sel('quoted'))

    body = ''
    text_el = _own_text_block(item_root, quoted)
    if text_el is not None:
        body = render_inline(text_el, max_depth=max_depth)

    return ThreadRecord(
        display_name=display_name,
        handle=handle,
        timestamp=timestamp,
        permalink=permalink,
        body=body,
        reply_context=_extract_reply_context(item_root),
        quote=_extract_quote(quoted, max_depth),
        has_image=select_first(item_root, _sel('photo')) is not None,
        has_video=select_first(item_root, _sel('video')) is not None,
        metrics=_extract_metrics(item_root),
    )


def _extract_author(item_root: Tag) -> Tuple[str, str, str, str]:
    display_name = ''
    handle = ''
    timestamp = ''
    permalink = ''

    user_name = select_first(item_root, _sel('user_name'))
    if user_name is None:
        return display_name, handle, timestamp, permalink

    # display name is the first text-bearing span
    name_el = select_first(user_name, _sel('display_name'))
    display_name = safe_text(name_el) or ''

    for link in select_all_first(user_name, _sel('author_link')):
        m = _HANDLE_HREF_RE.match(safe_attr(link, 'href') or '')
        if m:
            handle = '@' + m.group(1)
            break

    time_el = user_name.find('time') or item_root.find('time')
    if time_el is not None:
        timestamp = safe_attr(time_el, 'datetime') or time_el.get_text() or ''
        time_link = time_el.find_parent('a')
        if time_link is not None:
            permalink = absolute_url(safe_attr(time_link, 'href') or '')

    return display_name, handle, timestamp, permalink


def _extract_reply_context(item_root: Tag) -> Optional[Tuple[str, ...]]:
    ctx = select_first(item_root, _sel('social_context'))
    if ctx is None:
        return None
    handles = _MENTION_RE.findall(ctx.get_text())
    return tuple(handles) if handles else None


def _own_text_block(item_root: Tag, quoted: Optional[Tag]) -> Optional[Tag]:
    """First tweetText that belongs to the item itself, not to the quoted one."""
    for sel in _sel('tweet_text'):
        for el in item_root.select(sel):
            if quoted is None or not any(p is quoted for p in el.parents):
                return el
    return None


def _extract_quote(quoted: Optional[Tag], max_depth: int) -> Optional[QuotedRecord]:
    if quoted is None:
        return None
    q_text = select_first(quoted, _sel('tweet_text'))
    if q_text is None:
        return None
    q_user = select_first(quoted, _sel('user_name'))
    return QuotedRecord(
        author=safe_text(q_user) or '',
        body=render_inline(q_text, max_depth=max_depth),
    )


def classify_count_label(label: str) -> Optional[Tuple[MetricName, str]]:
    """Map an action button label to (metric, displayed count)."""
    m = _COUNT_LABEL_RE.match(label or '')
    if not m:
        return None
    category = m.group('category').lower()
    for prefix, metric in _CATEGORY_PREFIXES:
        if category.startswith(prefix):
            return metric, m.group('count')
    return None


def _extract_metrics(item_root: Tag) -> Optional[Dict[str, str]]:
    metrics: Dict[str, str] = {}
    # one combined selector keeps document order across button kinds
    for button in item_root.select(', '.join(_sel('action_buttons'))):
        hit = classify_count_label(safe_attr(button, 'aria-label') or '')
        if hit is None:
            continue
        metric, count = hit
        # first match per category wins
        metrics.setdefault(metric, count)
    return metrics or None
