import sys
import os
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import asyncio
import signal
from dotenv import load_dotenv
from src.utils.logging_config import setup_logging
from src.scrapers.x.thread import ThreadExporter, export_with_browser
from src.utils.output import guardar_markdown
from src.utils.url import is_platform_url

load_dotenv()
logger = setup_logging()


def mostrar_notificacion(msg: dict):
    """Imprime las notificaciones del exportador en consola"""
    tipo = msg.get("type")
    if tipo == "progress":
        print(f"⏳ {msg.get('message')}")
    elif tipo == "early_exit":
        print(f"🛑 Se detectó contenido oculto/spam. Captura parcial segura: {msg.get('count')} tweets")
    elif tipo == "result":
        print(f"✅ {msg.get('count')} tweets capturados")
    elif tipo == "cancelled":
        print("⚠️ Exportación detenida por el usuario")
    elif tipo == "error":
        print(f"❌ Error: {msg.get('message')}")


async def main_thread():
    print("📋 Instrucciones:")
    print("1. Guarda tu sesión de X en data/storage/x_storage_state.json (ver session.py)")
    print("2. Pega la URL de la conversación (https://x.com/usuario/status/123...)")
    print("3. Ctrl+C detiene el scroll y guarda lo capturado hasta el momento")
    print()

    url = input("Ingresa la URL de la conversación de X: ").strip()
    if not is_platform_url("x", url):
        print("❌ La URL debe ser de x.com o twitter.com")
        return
    headless = input("¿Ejecutar sin ventana? (s/n) [n]: ").strip().lower() == 's'

    exporter = ThreadExporter(publish=mostrar_notificacion)
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, exporter.stop)
    except (NotImplementedError, RuntimeError):
        # Windows: Ctrl+C termina el proceso sin guardar
        pass

    outcome = await export_with_browser(exporter, url, headless=headless)
    if not outcome.markdown:
        print("⚠️ No se encontraron tweets. Posibles causas:")
        print("  - No hay sesión iniciada")
        print("  - La URL no es una conversación")
        print("  - X cambió su estructura")
        return
    archivo = guardar_markdown(outcome.markdown)
    print(f"\n🎉 ¡Exportación completada! {archivo}")


if __name__ == "__main__":
    try:
        asyncio.run(main_thread())
    except KeyboardInterrupt:
        print("\n⚠️ Proceso interrumpido por el usuario")
    except Exception as e:
        print(f"❌ Error inesperado: {e}")
