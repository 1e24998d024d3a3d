import logging
import os
from datetime import datetime, timezone
from typing import Optional

from paths import EXPORTS_DIR

logger = logging.getLogger(__name__)


def nombre_archivo_export(now: Optional[datetime] = None, prefix: str = "twitter-conversation") -> str:
    """twitter-conversation-YYYYMMDDTHHMMSS.md (UTC)"""
    now = now or datetime.now(timezone.utc)
    return f"{prefix}-{now:%Y%m%dT%H%M%S}.md"


def guardar_markdown(markdown: str, directory: Optional[str] = None, now: Optional[datetime] = None) -> str:
    """Escribe el documento Markdown en disco (UTF-8) y devuelve la ruta creada."""
    directory = directory or EXPORTS_DIR
    os.makedirs(directory, exist_ok=True)
    path = os.path.join(directory, nombre_archivo_export(now))
    with open(path, 'w', encoding='utf-8', newline='\n') as f:
        f.write(markdown)
        if markdown and not markdown.endswith('\n'):
            f.write('\n')
    logger.info(f"export.saved path={path} bytes={len(markdown.encode('utf-8'))}")
    return path
