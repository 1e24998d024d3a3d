"""Incremental, idle-detecting collection of thread items.

X virtualizes the conversation: items far above the viewport are removed from
the tree as new ones load. Scanning before every scroll step and merging by
dedup key keeps every item that was ever rendered, once, in first-seen order.
"""
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional, Tuple

from src.scrapers import config_runtime
from src.scrapers.concurrency import CancellationToken, fire_and_forget
from src.scrapers.errors import ErrorCode, detect_early_exit
from src.scrapers.types import CollectReason, CollectResult, ThreadRecord
from src.scrapers.x.extract import extract_html
from src.scrapers.x.host import ThreadHost
from src.scrapers.x.rich_text import DEFAULT_MAX_DEPTH

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]

DEFAULT_SCROLL_DELAY_MS = 2500
DEFAULT_MAX_IDLE_ATTEMPTS = 15


def _int_setting(cfg: Dict, key: str, default: int) -> int:
    """Non-negative int from the thread config; bad overrides fall back to ``default``."""
    value = cfg.get(key, default)
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        parsed = -1
    if parsed < 0 or isinstance(value, bool):
        logger.warning(f"x.thread.config invalid key={key} value={value!r} using={default}")
        return default
    return parsed


@dataclass(frozen=True)
class CollectorSettings:
    scroll_delay_ms: int = DEFAULT_SCROLL_DELAY_MS
    max_idle_attempts: int = DEFAULT_MAX_IDLE_ATTEMPTS
    max_render_depth: int = DEFAULT_MAX_DEPTH
    # None -> indicators from the selector registry
    early_exit_indicators: Optional[Tuple[str, ...]] = None

    @classmethod
    def from_config(cls) -> "CollectorSettings":
        cfg = config_runtime.get('x', 'thread', {}) or {}
        indicators = cfg.get('early_exit_indicators')
        return cls(
            scroll_delay_ms=_int_setting(cfg, 'scroll_delay_ms', DEFAULT_SCROLL_DELAY_MS),
            max_idle_attempts=_int_setting(cfg, 'max_idle_attempts', DEFAULT_MAX_IDLE_ATTEMPTS),
            max_render_depth=_int_setting(cfg, 'max_render_depth', DEFAULT_MAX_DEPTH),
            early_exit_indicators=tuple(indicators) if indicators else None,
        )


class CollectorRun:
    """State of one collection run: dedup map, height watermark, counters."""

    def __init__(self, max_render_depth: int = DEFAULT_MAX_DEPTH):
        self.max_render_depth = max_render_depth
        self.records: Dict[str, ThreadRecord] = {}
        self.watermark = 0
        self.idle = 0
        self.cycles = 0
        self.skipped = 0
        self.started = time.time()

    @property
    def count(self) -> int:
        return len(self.records)

    def insert(self, record: ThreadRecord) -> bool:
        """Store ``record`` unless its key is already known. First write wins."""
        key = record.dedup_key
        if key in self.records:
            return False
        self.records[key] = record
        return True

    def absorb(self, snapshots: Iterable[str]) -> int:
        """Extract and insert a batch of item snapshots; return number of new records."""
        added = 0
        for idx, html in enumerate(snapshots):
            try:
                record = extract_html(html, max_depth=self.max_render_depth)
            except Exception as e:
                self.skipped += 1
                logger.warning(f"x.thread.item skipped code={ErrorCode.MALFORMED_ITEM.value} idx={idx} cycle={self.cycles} error={e}")
                continue
            if self.insert(record):
                added += 1
        return added

    def observe_height(self, height: int) -> None:
        if height == self.watermark:
            self.idle += 1
        else:
            self.idle = 0
            self.watermark = height

    def ordered(self) -> Tuple[ThreadRecord, ...]:
        return tuple(self.records.values())

    def result(self, reason: CollectReason) -> CollectResult:
        return CollectResult(
            records=self.ordered(),
            reason=reason,
            cycles=self.cycles,
            duration_ms=int((time.time() - self.started) * 1000),
        )

    def close(self) -> None:
        self.records = {}
        self.watermark = 0
        self.idle = 0
        self.cycles = 0


async def collect(
    host: ThreadHost,
    *,
    cancel: Optional[CancellationToken] = None,
    on_progress: Optional[ProgressCallback] = None,
    settings: Optional[CollectorSettings] = None,
    run: Optional[CollectorRun] = None,
    log_prefix: str = "x.thread",
) -> CollectResult:
    """Scroll the host until content height stays idle, collecting items on the way.

    Returns early (reason ``cancelled``) when ``cancel`` is set, checked once per
    cycle, and (reason ``early_exit``) as soon as a suppression banner shows up.
    Either way the records gathered so far are returned.
    """
    settings = settings or CollectorSettings.from_config()
    cancel = cancel or CancellationToken()
    run = run or CollectorRun(settings.max_render_depth)
    pause = settings.scroll_delay_ms / 1000

    try:
        run.watermark = await host.content_height()

        # pre-scroll pass: main tweet and the first visible replies
        added = run.absorb(await host.item_snapshots())
        logger.info(f"{log_prefix} start initial={added} height={run.watermark} url={host.url}")
        fire_and_forget(on_progress, run.count, 0, label="progress")

        while run.idle < settings.max_idle_attempts:
            if cancel.is_cancelled():
                logger.info(f"{log_prefix} cancelled cycle={run.cycles} total={run.count}")
                return run.result('cancelled')

            await host.scroll_to_bottom()
            await asyncio.sleep(pause)
            run.cycles += 1

            run.observe_height(await host.content_height())
            added = run.absorb(await host.item_snapshots())

            banner = detect_early_exit(await host.page_text(), settings.early_exit_indicators)
            if banner:
                logger.info(f"{log_prefix} early_exit code={ErrorCode.EARLY_EXIT.value} banner='{banner}' cycle={run.cycles} total={run.count}")
                return run.result('early_exit')

            logger.info(
                f"{log_prefix} cycle={run.cycles} new={added} total={run.count} "
                f"idle={run.idle} height={run.watermark}"
            )
            fire_and_forget(on_progress, run.count, run.cycles, label="progress")

        result = run.result('idle')
        logger.info(
            f"{log_prefix} end total={len(result.records)} reason=idle cycles={result.cycles} "
            f"skipped={run.skipped} duration_ms={result.duration_ms}"
        )
        return result
    finally:
        run.close()
