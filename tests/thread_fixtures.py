"""Synthetic X markup and a scripted host for collector/exporter tests."""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence


def tweet_html(
    name: str = "Alice",
    handle: str = "alice",
    status_id: str = "1",
    text_html: str = "<span>Hello</span>",
    datetime_: Optional[str] = "2024-01-05T15:04:00.000Z",
    reply_to: Sequence[str] = (),
    quote_html: str = "",
    photo: bool = False,
    video: bool = False,
    metrics: Optional[Dict[str, str]] = None,
) -> str:
    social = ""
    if reply_to:
        links = " ".join(f'<a href="/{h.lstrip("@")}" role="link">{h}</a>' for h in reply_to)
        social = f'<div data-testid="socialContext">Replying to {links}</div>'
    time_el = ""
    if datetime_ is not None:
        time_el = (
            f'<a role="link" href="/{handle}/status/{status_id}">'
            f'<time datetime="{datetime_}">Jan 5</time></a>'
        )
    text = f'<div data-testid="tweetText" lang="en">{text_html}</div>' if text_html is not None else ""
    media = ""
    if photo:
        media += '<div data-testid="tweetPhoto"><img alt="Image" src="https://pbs.twimg.com/media/a.jpg"></div>'
    if video:
        media += '<div data-testid="videoPlayer"><video></video></div>'
    buttons = ""
    for label_key, label in (metrics or {}).items():
        buttons += f'<button data-testid="{label_key}" aria-label="{label}" role="button"></button>'
    return (
        f'<article data-testid="tweet" role="article" aria-labelledby="id__{status_id}">'
        f'{social}'
        f'<div data-testid="User-Name">'
        f'<a role="link" href="/{handle}"><div><span>{name}</span></div></a>'
        f'<a role="link" href="/{handle}" tabindex="-1"><span>@{handle}</span></a>'
        f'{time_el}'
        f'</div>'
        f'{text}{media}{quote_html}'
        f'<div role="group">{buttons}</div>'
        f'</article>'
    )


def quote_html(name: str = "Carol", handle: str = "carol", text_html: str = "<span>Quoted</span>") -> str:
    return (
        f'<div role="link" tabindex="0" aria-labelledby="id__q">'
        f'<div data-testid="User-Name"><span>{name}</span><span>@{handle}</span></div>'
        f'<div data-testid="tweetText">{text_html}</div>'
        f'</div>'
    )


class FakeHost:
    """Scripted ThreadHost.

    ``passes[i]`` is what the i-th scan sees (0 is the pre-scroll scan); the
    last pass repeats. ``heights`` and ``texts`` work the same way per probe.
    """

    def __init__(
        self,
        passes: Sequence[List[str]],
        heights: Iterable[int] = (1000,),
        texts: Sequence[str] = ("",),
        url: str = "https://x.com/alice/status/1",
        fail_on_scan: Optional[int] = None,
    ):
        self.passes = list(passes)
        self.heights = list(heights)
        self.texts = list(texts)
        self._url = url
        self.fail_on_scan = fail_on_scan
        self.scans = 0
        self.scrolls = 0
        self.height_probes = 0
        self.text_probes = 0

    @property
    def url(self) -> str:
        return self._url

    @staticmethod
    def _pick(seq, idx):
        return seq[min(idx, len(seq) - 1)]

    async def item_snapshots(self) -> List[str]:
        if self.fail_on_scan is not None and self.scans == self.fail_on_scan:
            raise RuntimeError("page crashed")
        batch = self._pick(self.passes, self.scans)
        self.scans += 1
        return list(batch)

    async def scroll_to_bottom(self) -> None:
        self.scrolls += 1

    async def content_height(self) -> int:
        h = self._pick(self.heights, self.height_probes)
        self.height_probes += 1
        return h

    async def page_text(self) -> str:
        t = self._pick(self.texts, self.text_probes)
        self.text_probes += 1
        return t


def growing_heights(n: int = 500, step: int = 800) -> List[int]:
    return [1000 + i * step for i in range(n)]
