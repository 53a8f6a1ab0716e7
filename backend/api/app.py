import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.map_api import SessionRegistry, router
from overlay.singleton import get_overlay_store
from settings.loader import get_map_config


def create_app() -> FastAPI:
    logging.basicConfig(
        level=os.getenv("MARINER_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title="Mariner map annotations")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.sessions = SessionRegistry(
        config=get_map_config(),
        prefs_store=get_overlay_store(),
    )
    app.include_router(router)
    return app
