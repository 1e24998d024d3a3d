"""Tweet text → Markdown inline conversion.

Only the tag vocabulary X uses inside ``tweetText`` is handled; anything else
is recursed into so text is never dropped.
"""
from __future__ import annotations

import logging

from bs4 import Comment, NavigableString, Tag

from src.utils.url import absolute_url

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 64

ELLIPSIS = '…'

_BOLD_TAGS = {'strong', 'b'}
_ITALIC_TAGS = {'em', 'i'}


def render_inline(node: Tag, max_depth: int = DEFAULT_MAX_DEPTH) -> str:
    """Render the children of ``node`` as Markdown inline text."""
    return _render_children(node, 0, max_depth)


def _render_children(node: Tag, depth: int, max_depth: int) -> str:
    if depth >= max_depth:
        logger.debug("x.rich_text depth_cap depth=%d tag=%s", depth, getattr(node, 'name', None))
        return node.get_text()
    parts = []
    for child in node.children:
        if isinstance(child, Comment):
            continue
        if isinstance(child, NavigableString):
            parts.append(str(child))
        elif isinstance(child, Tag):
            parts.append(_render_element(child, depth + 1, max_depth))
    return ''.join(parts)


def _render_element(el: Tag, depth: int, max_depth: int) -> str:
    tag = (el.name or '').lower()
    if tag == 'a':
        return _render_link(el)
    if tag == 'img':
        return el.get('alt') or ''
    if tag == 'br':
        return '\n'
    if tag in _BOLD_TAGS:
        return f"**{_render_children(el, depth, max_depth)}**"
    if tag in _ITALIC_TAGS:
        return f"*{_render_children(el, depth, max_depth)}*"
    # span/div and unknown tags alike: recurse without wrapping
    return _render_children(el, depth, max_depth)


def _render_link(el: Tag) -> str:
    href = el.get('href') or ''
    text = el.get_text().strip()
    # hashtag and mention chips
    if text.startswith('#') or text.startswith('@'):
        return f"**{text}**"
    if not href:
        return text
    url = absolute_url(href)
    # t.co hides the destination in title
    label = el.get('title') or text
    if label and label != ELLIPSIS and label != url:
        return f"[{label}]({url})"
    return url
