from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.gzip import GZipMiddleware

from prometheus_client import make_asgi_app

from panel.core.config import get_settings
from panel.routers import eggs as eggs_router


logger = logging.getLogger(__name__)

settings = get_settings()

app = FastAPI(title="Panel Admin API", version="0.1.0")
app.add_middleware(GZipMiddleware, minimum_size=500)

app.mount("/metrics", make_asgi_app())

# Logging
root_level = getattr(logging, (settings.LOG_LEVEL or "INFO").upper(), logging.INFO)
logging.basicConfig(
    level=root_level,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
db_level = getattr(logging, (settings.DATABASE_LOG_LEVEL or "WARNING").upper(), logging.WARNING)
logging.getLogger("panel.services.database").setLevel(db_level)

# Routers
app.include_router(eggs_router.router)


# Meta
@app.get("/api/health", tags=["meta"])
async def api_health():
    return {
        "ok": True,
        "database": {"driver": get_settings().DB_CONNECTION},
    }
