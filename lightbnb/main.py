# ---------------------------------------------------------
# lightbnb/main.py
# LightBnB - Listings Backend
#
# Run: uvicorn lightbnb.main:app --reload (from repo root)
#
# - FastAPI + async SQLAlchemy (PostgreSQL via asyncpg, SQLite via aiosqlite)
# - /api/properties    : filtered listing search / add listing
# - /api/reservations  : reservations for a guest
# - /users             : register / fetch user
# ---------------------------------------------------------

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Dict, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

try:
    from lightbnb.config import CORS_ORIGINS, DATABASE_URL
    from lightbnb.db import Store
    from lightbnb.routes_api import router
except ModuleNotFoundError:
    from config import CORS_ORIGINS, DATABASE_URL
    from db import Store
    from routes_api import router


def create_app(database_url: Optional[str] = None) -> FastAPI:
    """Build the app; the store is opened on startup and disposed on shutdown."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.store = Store.from_url(database_url or DATABASE_URL)
        try:
            yield
        finally:
            await app.state.store.dispose()

    app = FastAPI(title="LightBnB API", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health() -> Dict[str, str]:
        return {"status": "ok"}

    app.include_router(router)
    return app


app = create_app()
