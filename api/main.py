import os
import sys
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Make repo root importable
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT_DIR not in sys.path:
    sys.path.append(ROOT_DIR)

from paths import ensure_dirs
from src.utils.logging_config import setup_logging

# Load env variables from ./.env if present
load_dotenv(dotenv_path=os.path.join(ROOT_DIR, '.env'))


def create_app() -> FastAPI:
    # Configure logging early
    setup_logging()
    ensure_dirs()
    app = FastAPI(title="X Thread Markdown API", version="0.1.0")

    # CORS
    _default_frontend_origins = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
    ]
    _extra_origins = [o.strip() for o in (os.getenv("FRONTEND_ORIGINS") or "").split(",") if o.strip()]
    _allowed_origins = list({*(_default_frontend_origins + _extra_origins)})
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routers
    from .routers.health import router as health_router
    from .routers.config import router as config_router
    from .routers.thread import router as thread_router
    from .routers.realtime import router as realtime_router

    app.include_router(health_router)
    app.include_router(config_router)
    app.include_router(thread_router)
    app.include_router(realtime_router)

    return app

app = create_app()
