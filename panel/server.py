from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import uvicorn

from panel.core.config import Settings, get_settings


logger = logging.getLogger(__name__)

APP_IMPORT = "panel.main:app"


def uvicorn_options(settings: Settings) -> Dict[str, Any]:
    """Map panel settings onto uvicorn.run keyword arguments."""
    workers = max(1, int(settings.WORKERS or 1))
    reload_dirs: Optional[list] = None
    if settings.RELOAD:
        # reload runs a single supervised process
        workers = 1
        reload_dirs = [str(Path(__file__).resolve().parent)]

    return {
        "host": settings.HOST,
        "port": settings.PORT,
        "reload": settings.RELOAD,
        "workers": workers,
        "reload_dirs": reload_dirs,
        "log_level": (settings.LOG_LEVEL or "info").lower(),
    }


def main() -> None:
    """Run the admin API (validation endpoints, health, metrics)."""
    options = uvicorn_options(get_settings())
    logger.info(
        "starting admin API on %s:%s (reload=%s, workers=%s)",
        options["host"],
        options["port"],
        options["reload"],
        options["workers"],
    )
    # uvicorn needs the import string for reload and for more than one worker
    uvicorn.run(APP_IMPORT, **options)


if __name__ == "__main__":
    main()
