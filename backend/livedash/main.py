# backend/livedash/main.py
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from livedash.api.dashboard import router as dashboard_router
from livedash.api.engine import router as engine_router
from livedash.api.widgets import router as widgets_router
from livedash.session import DashboardSession
from livedash.settings import Settings


def create_app(settings: Optional[Settings] = None, session: Optional[DashboardSession] = None) -> FastAPI:
    settings = settings or (session.settings if session else Settings.from_env())
    logging.basicConfig(level=settings.log_level)
    session = session or DashboardSession(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.autostart and not session.engine_running:
            await session.start_engine()
        try:
            yield
        finally:
            # Never leave a timer mutating a discarded store.
            await session.stop_engine()

    app = FastAPI(title="Live Metrics Dashboard API", version="0.1.0", lifespan=lifespan)
    app.state.session = session

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health check
    @app.get("/api/health")
    def health():
        return {"status": "ok"}

    # ===== Routers (all required: fail fast to avoid a half-broken system) =====
    for router in (dashboard_router, engine_router, widgets_router):
        app.include_router(router)
        logging.info("Mounted router: %s", router.prefix)

    return app


app = create_app()
