from playwright.sync_api import sync_playwright

from paths import STORAGE_DIR, ensure_dirs

ensure_dirs()
with sync_playwright() as p:
    browser = p.chromium.launch(headless=False)
    context = browser.new_context()
    page = context.new_page()
    page.goto("https://x.com/login")
    input("Inicia sesión manualmente en X y presiona Enter...")
    context.storage_state(path=f"{STORAGE_DIR}/x_storage_state.json")
    browser.close()
