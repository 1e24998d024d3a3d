from __future__ import annotations

import re
from urllib.parse import urlparse, urlunparse


CANONICAL_HOST = {
    'x': 'x.com',
}

CANONICAL_ORIGIN = 'https://x.com'

ALIASES = {
    'x': {
        'x.com', 'www.x.com', 'twitter.com', 'www.twitter.com', 'mobile.twitter.com', 'm.twitter.com'
    },
}

# /<user>/status/<id>, also the legacy /statuses/ form
_STATUS_PATH_RE = re.compile(r'/([A-Za-z0-9_]+)/status(?:es)?/')


def _ensure_https(url: str) -> str:
    if not url:
        return url
    if url.startswith(('http://', 'https://')):
        return url
    return 'https://' + url.lstrip('/')


def absolute_url(href: str, origin: str = CANONICAL_ORIGIN) -> str:
    """Resolve a root-relative href against the platform origin.

    Absolute URLs pass through untouched; anything else that is not rooted
    (``mailto:``, fragments) is returned as-is.
    """
    if not href:
        return href
    if href.startswith(('http://', 'https://')):
        return href
    if href.startswith('//'):
        return 'https:' + href
    if href.startswith('/'):
        return origin.rstrip('/') + href
    return href


def is_platform_url(platform: str, url: str) -> bool:
    if not url:
        return False
    host = (urlparse(_ensure_https(url.strip())).netloc or '').lower().split(':')[0]
    return host in ALIASES.get((platform or '').lower(), set())


def normalize_input_url(platform: str, url: str) -> str:
    """Normalize a conversation URL for a given platform.
    - Ensures https
    - Maps alias domains (twitter.com, mobile.twitter.com) to canonical
    - Drops query string and fragment
    """
    if not url:
        return url
    url = _ensure_https(url.strip())
    p = urlparse(url)
    host = (p.netloc or '').lower().split(':')[0]

    plat = (platform or '').lower()
    if host in ALIASES.get(plat, {host}):
        host = CANONICAL_HOST.get(plat, host)

    path = (p.path or '/').replace('//', '/')
    if not path.startswith('/'):
        path = '/' + path
    if '/status/' in path:
        path = path.rstrip('/')
    return urlunparse(('https', host, path, '', '', ''))


def extract_status_author(url: str) -> str | None:
    """Return ``@handle`` for the segment preceding ``/status/`` in ``url``."""
    if not url:
        return None
    path = urlparse(_ensure_https(url.strip())).path or ''
    m = _STATUS_PATH_RE.search(path)
    if not m:
        return None
    return '@' + m.group(1)
