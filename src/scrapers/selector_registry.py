"""Selector registry versionado para el exportador de hilos.

Proporciona un punto centralizado para administrar los selectores clave por plataforma
con capacidad de versionado para facilitar actualizaciones y rollback.
"""
from typing import List, Dict, Any

SELECTOR_REGISTRY: Dict[str, Dict[str, Any]] = {
    "x": {
        "version": "x-thread-1",
        "thread": {
            "item": [
                '[data-testid="tweet"]'
            ],
            "user_name": [
                '[data-testid="User-Name"]'
            ],
            "display_name": [
                'a[role="link"] span:not([aria-hidden])'
            ],
            "author_link": [
                'a[role="link"]'
            ],
            "social_context": [
                '[data-testid="socialContext"]'
            ],
            "tweet_text": [
                '[data-testid="tweetText"]'
            ],
            "quoted": [
                '[aria-labelledby]'
            ],
            "photo": [
                '[data-testid="tweetPhoto"]'
            ],
            "video": [
                '[data-testid="videoPlayer"]'
            ],
            "action_buttons": [
                'button[aria-label]',
                'a[aria-label]',
                '[role="button"][aria-label]'
            ]
        },
        "early_exit_indicators": [
            'Show probable spam',
            'Show hidden replies',
            'Show additional replies',
            'Mostrar posible spam',
            'Mostrar respuestas ocultas',
            'Mostrar respuestas adicionales'
        ],
        "private_indicators": [
            'These posts are protected', 'Estas publicaciones son protegidas', 'These Tweets are protected'
        ],
        "login_indicators": [
            'Log in', 'Iniciar sesión'
        ]
    }
}

class SelectorRegistryError(Exception):
    pass

def registry_version(platform: str) -> str:
    data = SELECTOR_REGISTRY.get(platform)
    if not data:
        raise SelectorRegistryError(f"No registry for platform={platform}")
    return data.get("version", "unknown")

def get_selectors(platform: str, category: str) -> List[str]:
    data = SELECTOR_REGISTRY.get(platform)
    if not data:
        raise SelectorRegistryError(f"No registry for platform={platform}")
    # Navegar jerárquicamente por keys separadas por '.'
    cur: Any = data
    for part in category.split('.'):
        if isinstance(cur, dict) and part in cur:
            cur = cur[part]
        else:
            raise SelectorRegistryError(f"Category '{category}' not found for platform={platform}")
    if not isinstance(cur, list):
        raise SelectorRegistryError(f"Category '{category}' is not a list for platform={platform}")
    return cur

def text_indicators(platform: str, key: str) -> List[str]:
    data = SELECTOR_REGISTRY.get(platform, {})
    return data.get(key, [])  # type: ignore
