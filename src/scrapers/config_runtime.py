from __future__ import annotations
import json
import logging
import os
from typing import Any, Dict
from functools import lru_cache

from paths import REPO_ROOT, CONFIG_DIR

logger = logging.getLogger(__name__)

DEFAULTS_PATH = os.path.join(REPO_ROOT, 'src', 'scrapers', 'scrapers_config.json')
OVERRIDES_DIR = CONFIG_DIR
OVERRIDES_PATH = os.path.join(OVERRIDES_DIR, 'scrapers_overrides.json')

# platform -> {ENV_VAR: dot.path}
ENV_MAPPING: Dict[str, Dict[str, str]] = {
    'x': {
        'X_THREAD_SCROLL_DELAY_MS': 'thread.scroll_delay_ms',
        'X_THREAD_MAX_IDLE': 'thread.max_idle_attempts',
        'X_THREAD_MAX_DEPTH': 'thread.max_render_depth',
        'X_THREAD_ENGAGEMENT': 'thread.include_engagement',
        'X_STORAGE_STATE': 'storage_state_path',
    },
}


def _deep_merge(dst: Dict[str, Any], src: Dict[str, Any]) -> Dict[str, Any]:
    for k, v in src.items():
        if isinstance(v, dict) and isinstance(dst.get(k), dict):
            _deep_merge(dst[k], v)
        else:
            dst[k] = v
    return dst


def _set_by_path(d: Dict[str, Any], path: str, value: Any) -> None:
    parts = path.split('.') if path else []
    cur = d
    for p in parts[:-1]:
        if p not in cur or not isinstance(cur[p], dict):
            cur[p] = {}
        cur = cur[p]
    if parts:
        cur[parts[-1]] = value


def _get_by_path(d: Dict[str, Any], path: str, default: Any) -> Any:
    cur: Any = d
    for p in path.split('.') if path else []:
        if not isinstance(cur, dict) or p not in cur:
            return default
        cur = cur[p]
    return cur


def _coerce(val: str) -> Any:
    # Best-effort type coercion: ints where possible, then booleans
    if val.isdigit():
        return int(val)
    low = val.lower()
    if low in ("true", "false"):
        return low == "true"
    return val


def _env_overrides() -> Dict[str, Dict[str, Any]]:
    """Map specific environment variables into config dot-paths by platform."""
    result: Dict[str, Dict[str, Any]] = {k: {} for k in ENV_MAPPING.keys()}
    for platform, envmap in ENV_MAPPING.items():
        for env_key, path in envmap.items():
            val = os.getenv(env_key)
            if val is None:
                continue
            _set_by_path(result[platform], path, _coerce(val))
    return result


@lru_cache(maxsize=1)
def _cached_effective_config() -> Dict[str, Any]:
    with open(DEFAULTS_PATH, 'r', encoding='utf-8') as f:
        data = json.load(f)

    if os.path.isfile(OVERRIDES_PATH):
        try:
            with open(OVERRIDES_PATH, 'r', encoding='utf-8') as f:
                overrides = json.load(f)
            if isinstance(overrides, dict):
                _deep_merge(data, overrides)
        except (OSError, ValueError) as e:
            # Broken overrides are ignored; caller can fix via API
            logger.warning(f"scrapers.config overrides_error path={OVERRIDES_PATH} error={e}")

    for platform, ov in _env_overrides().items():
        if ov:
            if platform not in data or not isinstance(data[platform], dict):
                data[platform] = {}
            _deep_merge(data[platform], ov)

    return data


def effective_config(refresh: bool = False) -> Dict[str, Any]:
    """Return merged configuration: defaults + overrides + environment.

    Set refresh=True to drop the cache.
    """
    if refresh:
        _cached_effective_config.cache_clear()  # type: ignore[attr-defined]
    return _cached_effective_config()


def get(platform: str, path: str, default: Any = None) -> Any:
    cfg = effective_config()
    platform_cfg = cfg.get(platform, {}) if isinstance(cfg, dict) else {}
    return _get_by_path(platform_cfg, path, default)


def set_override(platform: str, path: str, value: Any) -> None:
    """Persist an override for a platform at a dot-path.

    Writes to data/config/scrapers_overrides.json and clears cache.
    """
    os.makedirs(os.path.dirname(OVERRIDES_PATH), exist_ok=True)
    current: Dict[str, Any] = {}
    if os.path.isfile(OVERRIDES_PATH):
        try:
            with open(OVERRIDES_PATH, 'r', encoding='utf-8') as f:
                current = json.load(f) or {}
        except (OSError, ValueError):
            current = {}

    if platform not in current or not isinstance(current[platform], dict):
        current[platform] = {}
    _set_by_path(current[platform], path, value)

    with open(OVERRIDES_PATH, 'w', encoding='utf-8') as f:
        json.dump(current, f, ensure_ascii=False, indent=2)

    _cached_effective_config.cache_clear()  # type: ignore[attr-defined]


__all__ = [
    'effective_config',
    'get',
    'set_override',
]
