from __future__ import annotations

from panel import server
from panel.core.config import Settings


def test_options_from_settings():
    options = server.uvicorn_options(Settings(_env_file=None, HOST="127.0.0.1", PORT=9000, WORKERS=4, LOG_LEVEL="DEBUG"))

    assert options == {
        "host": "127.0.0.1",
        "port": 9000,
        "reload": False,
        "workers": 4,
        "reload_dirs": None,
        "log_level": "debug",
    }


def test_reload_forces_single_worker():
    options = server.uvicorn_options(Settings(_env_file=None, RELOAD=True, WORKERS=3))

    assert options["reload"] is True
    assert options["workers"] == 1
    assert options["reload_dirs"][0].endswith("panel")


def test_main_runs_app_import_string(monkeypatch):
    calls = []
    monkeypatch.setattr(server, "get_settings", lambda: Settings(_env_file=None, PORT=8181))
    monkeypatch.setattr(server.uvicorn, "run", lambda target, **kwargs: calls.append((target, kwargs)))

    server.main()

    assert calls[0][0] == "panel.main:app"
    assert calls[0][1]["port"] == 8181
    assert calls[0][1]["host"] == "0.0.0.0"
