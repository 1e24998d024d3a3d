from typing import Any, Dict, List, Optional, Literal
from pydantic import BaseModel, Field, field_validator


class ThreadExportRequest(BaseModel):
    url: str = Field(..., description="URL de la conversación, p.ej. https://x.com/usuario/status/123")
    headless: bool = True

    @field_validator('url')
    @classmethod
    def _strip_url(cls, v: str) -> str:
        v = (v or '').strip()
        if not v:
            raise ValueError('url requerida')
        return v


class Ack(BaseModel):
    ok: bool = True


class PingResponse(BaseModel):
    ok: bool = True
    is_scrolling: bool


class ThreadOutcome(BaseModel):
    url: str
    markdown: str
    count: int
    reason: Literal['idle', 'early_exit', 'cancelled']
    cycles: int
    finished_at: str
    early_exit: bool = False
    records: List[Dict[str, Any]] = Field(default_factory=list)


class HealthResponse(BaseModel):
    status: Literal['ok']
    is_scrolling: bool
    registry_version: Optional[str] = None
