"""Thread export service: one collection run at a time, notifications out.

Owns the active run (cancellation token + collector state) and turns the
collector outcome into the notification variants consumed by the UI:
progress, result, early_exit, cancelled and error.
"""
from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

from playwright.async_api import async_playwright

from paths import REPO_ROOT
from src.scrapers import config_runtime
from src.scrapers.concurrency import CancellationToken, fire_and_forget
from src.scrapers.errors import ErrorCode, classify_page_state
from src.scrapers.types import CollectReason, Notification, ThreadRecord
from src.scrapers.x.collector import CollectorRun, CollectorSettings, collect
from src.scrapers.x.host import PlaywrightThreadHost, ThreadHost
from src.scrapers.x.markdown import render
from src.utils.exceptions import HostUnavailableError, RunInProgressError
from src.utils.url import normalize_input_url

logger = logging.getLogger(__name__)

Publisher = Callable[[Notification], Any]


def _ts():
    return time.strftime('%Y-%m-%dT%H:%M:%S', time.gmtime())


@dataclass(frozen=True)
class ExportOutcome:
    url: str
    markdown: str
    count: int
    reason: CollectReason
    cycles: int
    finished_at: str
    records: Tuple[ThreadRecord, ...] = ()

    @property
    def early_exit(self) -> bool:
        return self.reason == 'early_exit'

    def to_dict(self) -> Dict[str, Any]:
        return {
            'url': self.url,
            'markdown': self.markdown,
            'count': self.count,
            'reason': self.reason,
            'cycles': self.cycles,
            'finished_at': self.finished_at,
            'records': [r.to_dict() for r in self.records],
        }


class ExportRun:
    """Handle on the in-flight export, owned by ThreadExporter."""

    def __init__(self, url: str, settings: CollectorSettings):
        self.url = url
        self.settings = settings
        self.cancel = CancellationToken()
        self.collector = CollectorRun(settings.max_render_depth)


class ThreadExporter:
    def __init__(
        self,
        publish: Optional[Publisher] = None,
        settings_factory: Callable[[], CollectorSettings] = CollectorSettings.from_config,
        include_engagement: Optional[bool] = None,
    ):
        self.publish = publish
        self.settings_factory = settings_factory
        self.include_engagement = include_engagement
        self.active: Optional[ExportRun] = None
        self.last_outcome: Optional[ExportOutcome] = None

    @property
    def is_scrolling(self) -> bool:
        return self.active is not None

    def ping(self) -> Dict[str, Any]:
        return {"ok": True, "is_scrolling": self.is_scrolling}

    def stop(self) -> bool:
        """Request cancellation of the active run. False when nothing is running."""
        if self.active is None:
            return False
        self.active.cancel.cancel("stop")
        return True

    def notify(self, payload: Notification) -> None:
        fire_and_forget(self.publish, payload, label=payload.get('type', 'notify'))

    def _on_progress(self, count: int, cycle: int) -> None:
        self.notify({
            "type": "progress",
            "message": f"Scrolling… {count} unique tweets captured (pass {cycle})",
            "count": count,
        })

    def _engagement_enabled(self) -> bool:
        if self.include_engagement is not None:
            return self.include_engagement
        return bool(config_runtime.get('x', 'thread.include_engagement', True))

    def begin(self, url: str) -> ExportRun:
        """Reserve the single run slot; raises RunInProgressError if taken."""
        if self.active is not None:
            raise RunInProgressError()
        self.active = ExportRun(url, self.settings_factory())
        return self.active

    async def export(self, host: ThreadHost, run: Optional[ExportRun] = None) -> ExportOutcome:
        """Collect and render the conversation currently shown by ``host``.

        Cancellation still returns the partial document; only the cancelled
        notification goes out without data. Any other failure is published as
        an error notification and re-raised.
        """
        if run is None:
            run = self.begin(host.url)
        elif run is not self.active:
            raise RunInProgressError("La ejecución no corresponde a la activa")

        try:
            self.notify({"type": "progress", "message": "Starting scroll…", "count": 0})
            result = await collect(
                host,
                cancel=run.cancel,
                on_progress=self._on_progress,
                settings=run.settings,
                run=run.collector,
            )
            if not result.records:
                await self._log_empty_reason(host)

            markdown = render(result.records, host.url, include_engagement=self._engagement_enabled())
            outcome = ExportOutcome(
                url=host.url,
                markdown=markdown,
                count=len(result.records),
                reason=result.reason,
                cycles=result.cycles,
                finished_at=_ts(),
                records=result.records,
            )
            self.last_outcome = outcome

            if result.cancelled:
                self.notify({"type": "cancelled"})
            elif result.early_exit:
                self.notify({"type": "early_exit", "markdown": markdown, "count": outcome.count})
            else:
                self.notify({"type": "result", "markdown": markdown, "count": outcome.count})
            logger.info(f"{_ts()} x.thread.export done reason={outcome.reason} count={outcome.count} url={outcome.url}")
            return outcome
        except Exception as e:
            code = ErrorCode.HOST_UNAVAILABLE.value if isinstance(e, HostUnavailableError) else e.__class__.__name__
            logger.error(f"{_ts()} x.thread.export code={code} error={e} url={run.url}")
            self.notify({"type": "error", "message": str(e) or e.__class__.__name__})
            raise
        finally:
            self.active = None

    async def _log_empty_reason(self, host: ThreadHost) -> None:
        try:
            code = classify_page_state('x', await host.page_text())
        except Exception as e:
            logger.debug(f"x.thread.export empty_reason_probe_failed error={e}")
            return
        reason = (code or ErrorCode.NOT_FOUND).value
        logger.warning(f"{_ts()} x.thread.export empty_reason={reason} url={host.url}")


def storage_state_path() -> Optional[str]:
    path = config_runtime.get('x', 'storage_state_path')
    if not path:
        return None
    if not os.path.isabs(path):
        path = os.path.join(REPO_ROOT, path)
    return path if os.path.isfile(path) else None


async def open_thread_host(page, url: str, timeout_ms: int = 8000) -> PlaywrightThreadHost:
    """Navigate to the conversation and wait for the first item to render.

    A page with no items yet is still returned; collection may reveal them, and
    the login/private state is logged up front.
    """
    await page.goto(url)
    host = PlaywrightThreadHost(page)
    if not await host.wait_for_items(timeout_ms):
        try:
            code = classify_page_state('x', await host.page_text())
        except HostUnavailableError as e:
            logger.debug(f"x.thread.browser page_state_probe_failed error={e}")
            code = None
        reason = (code or ErrorCode.NOT_FOUND).value
        logger.warning(f"{_ts()} x.thread.browser no_items reason={reason} url={url}")
    return host


async def export_with_browser(
    exporter: ThreadExporter,
    url: str,
    *,
    headless: bool = True,
    run: Optional[ExportRun] = None,
) -> ExportOutcome:
    """Open ``url`` in Chromium (stored X session if any) and export the thread."""
    url = normalize_input_url('x', url)
    if run is None:
        run = exporter.begin(url)
    try:
        async with async_playwright() as pw:
            browser = await pw.chromium.launch(headless=headless)
            try:
                context = await browser.new_context(storage_state=storage_state_path())
                page = await context.new_page()
                host = await open_thread_host(page, url)
                return await exporter.export(host, run=run)
            finally:
                await browser.close()
    except Exception as e:
        if exporter.active is run:
            # failed before export() took over (launch, navigation)
            logger.error(f"{_ts()} x.thread.browser error={e} url={url}")
            exporter.notify({"type": "error", "message": str(e) or e.__class__.__name__})
        raise
    finally:
        # export() frees the slot itself; this covers failures before it ran
        if exporter.active is run:
            exporter.active = None
