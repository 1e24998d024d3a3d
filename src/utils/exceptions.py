"""
Excepciones personalizadas para el exportador de hilos.
"""


class ScraperException(Exception):
    """Excepción base para todos los errores de scraping."""
    pass


class MalformedItemError(ScraperException):
    """
    Se lanza cuando un item del feed no tiene una estructura reconocible.
    El colector la captura por item y continúa con el resto del lote.
    """
    def __init__(self, message: str = "Item con estructura inesperada", snippet: str = ""):
        self.snippet = snippet[:120]
        self.message = message
        super().__init__(self.message)


class RunInProgressError(ScraperException):
    """
    Se lanza cuando se intenta iniciar una exportación mientras otra sigue activa.
    """
    def __init__(self, message: str = "Ya hay una exportación en curso"):
        self.message = message
        super().__init__(self.message)


class HostUnavailableError(ScraperException):
    """
    Se lanza cuando la página anfitriona no responde (pestaña cerrada, navegador caído).
    """
    def __init__(self, operation: str, message: str = "La página no está disponible"):
        self.operation = operation
        self.message = f"{message}: {operation}"
        super().__init__(self.message)
