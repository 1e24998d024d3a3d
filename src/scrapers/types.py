from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Literal, Mapping, Optional, Tuple, TypedDict

MetricName = Literal['replies', 'reposts', 'likes', 'bookmarks', 'views']

METRIC_NAMES: Tuple[MetricName, ...] = ('replies', 'reposts', 'likes', 'bookmarks', 'views')

# handle + first N chars of body identify an item across rescans
DEDUP_BODY_CHARS = 80

CollectReason = Literal['idle', 'early_exit', 'cancelled']


@dataclass(frozen=True)
class QuotedRecord:
    author: str
    body: str


@dataclass(frozen=True)
class ThreadRecord:
    display_name: str = ''
    handle: str = ''
    timestamp: str = ''
    permalink: str = ''
    body: str = ''
    reply_context: Optional[Tuple[str, ...]] = None
    quote: Optional[QuotedRecord] = None
    has_image: bool = False
    has_video: bool = False
    metrics: Optional[Mapping[str, str]] = None

    def __post_init__(self):
        # freeze container fields so the record cannot be mutated after extraction
        if self.reply_context is not None and not isinstance(self.reply_context, tuple):
            object.__setattr__(self, 'reply_context', tuple(self.reply_context))
        if self.metrics is not None and not isinstance(self.metrics, MappingProxyType):
            object.__setattr__(self, 'metrics', MappingProxyType(dict(self.metrics)))

    @property
    def dedup_key(self) -> str:
        return f"{self.handle}::{(self.body or '')[:DEDUP_BODY_CHARS]}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'display_name': self.display_name,
            'handle': self.handle,
            'timestamp': self.timestamp,
            'permalink': self.permalink,
            'body': self.body,
            'reply_context': list(self.reply_context) if self.reply_context is not None else None,
            'quote': {'author': self.quote.author, 'body': self.quote.body} if self.quote else None,
            'has_image': self.has_image,
            'has_video': self.has_video,
            'metrics': dict(self.metrics) if self.metrics is not None else None,
        }


@dataclass(frozen=True)
class CollectResult:
    records: Tuple[ThreadRecord, ...] = field(default_factory=tuple)
    reason: CollectReason = 'idle'
    cycles: int = 0
    duration_ms: int = 0

    @property
    def early_exit(self) -> bool:
        return self.reason == 'early_exit'

    @property
    def cancelled(self) -> bool:
        return self.reason == 'cancelled'


class Notification(TypedDict, total=False):
    type: Literal['progress', 'result', 'early_exit', 'cancelled', 'error']
    message: str
    markdown: str
    count: int
