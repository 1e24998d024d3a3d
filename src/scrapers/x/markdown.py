from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from src.scrapers.types import METRIC_NAMES, ThreadRecord
from src.utils.url import extract_status_author

logger = logging.getLogger(__name__)

REPLIES_HEADING = "## 💬 Replies"
AUTHOR_REPLY_FLAG = " 👤 **Author's Reply**"

_METRIC_ICONS = {
    'replies': '💬',
    'reposts': '🔁',
    'likes': '❤️',
    'bookmarks': '🔖',
    'views': '👁',
}


def format_timestamp(ts: str) -> str:
    """ISO timestamp -> "Jan 5, 2024, 03:04 PM" (UTC). Anything unparsable is returned raw."""
    if not ts:
        return ""
    try:
        d = datetime.fromisoformat(ts.replace('Z', '+00:00'))
    except ValueError:
        return ts
    if d.tzinfo is not None:
        d = d.astimezone(timezone.utc)
    return f"{d:%b} {d.day}, {d:%Y}, {d:%I:%M %p}"


def _engagement_line(t: ThreadRecord) -> Optional[str]:
    parts = []
    if t.has_image:
        parts.append("📷 Image")
    if t.has_video:
        parts.append("🎥 Video")
    if t.metrics:
        for name in METRIC_NAMES:
            count = t.metrics.get(name)
            if count:
                parts.append(f"{_METRIC_ICONS[name]} {count} {name}")
    if not parts:
        return None
    return "*" + " · ".join(parts) + "*"


def render_record(
    t: ThreadRecord,
    heading: str,
    lines: List[str],
    is_author_reply: bool = False,
    include_engagement: bool = True,
) -> None:
    """Append the Markdown block of one record to ``lines``."""
    if t.display_name:
        author = f"{t.display_name} ({t.handle})"
    else:
        author = t.handle or "Unknown"
    flag = AUTHOR_REPLY_FLAG if is_author_reply else ""
    lines.append(f"{heading} {author}{flag}")

    if t.timestamp:
        if t.permalink:
            lines.append(f"*[{format_timestamp(t.timestamp)}]({t.permalink})*")
        else:
            lines.append(f"*{format_timestamp(t.timestamp)}*")

    if t.reply_context:
        lines.append(f"*Replying to {' '.join(t.reply_context)}*")

    lines.append("")

    if t.body:
        lines.append(t.body)
        lines.append("")

    if include_engagement:
        engagement = _engagement_line(t)
        if engagement:
            lines.append(engagement)
            lines.append("")

    if t.quote:
        lines.append(f"> **Quoting {t.quote.author or ''}:**")
        for line in t.quote.body.split("\n"):
            lines.append(f"> {line}")
        lines.append("")


def select_main_index(records: Sequence[ThreadRecord], origin_url: str) -> int:
    op_handle = extract_status_author(origin_url)
    if op_handle:
        for i, t in enumerate(records):
            if t.handle == op_handle:
                return i
    return 0


def render(records: Sequence[ThreadRecord], origin_url: str, include_engagement: bool = True) -> str:
    """Render deduplicated records as one Markdown document.

    The main record (author taken from the ``/<user>/status/`` URL, else the
    first record) heads the document; every other record follows under the
    replies section, in collection order.
    """
    if not records:
        return ""

    main_idx = select_main_index(records, origin_url)
    main = records[main_idx]
    lines: List[str] = []
    render_record(main, "##", lines, include_engagement=include_engagement)

    replies = [t for i, t in enumerate(records) if i != main_idx]
    if replies:
        lines.append("")
        lines.append("---")
        lines.append("")
        lines.append(REPLIES_HEADING)
        lines.append("")

    for t in replies:
        is_author_reply = bool(main.handle) and t.handle == main.handle
        render_record(t, "###", lines, is_author_reply, include_engagement=include_engagement)

    logger.debug(f"x.thread.render main_idx={main_idx} replies={len(replies)}")
    return "\n".join(lines)
