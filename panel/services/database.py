from __future__ import annotations

from typing import Any, Dict, Optional
import logging

from sqlalchemy import create_engine, text
from sqlalchemy.engine import URL, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import NullPool

from panel.metrics import DATABASE_PROBE_TOTAL
from panel.schemas import ConnectionProfile


logger = logging.getLogger(__name__)

PROBE_CONNECTION_NAME = "_panel_command_test"

SQLALCHEMY_DRIVERS = {
    "mariadb": "mariadb+pymysql",
    "mysql": "mysql+pymysql",
    "pgsql": "postgresql+psycopg2",
}


class DatabaseConnectionError(Exception):
    """A probe could not open a connection with the given parameters."""

    def __init__(self, driver: str, message: str):
        super().__init__(message)
        self.driver = driver
        self.message = message


def build_probe_config(profile: ConnectionProfile) -> Dict[str, Any]:
    """Ephemeral connection configuration used to test a profile."""
    is_pgsql = profile.driver == "pgsql"
    return {
        "driver": profile.driver,
        "host": profile.host,
        "port": profile.port,
        "database": profile.database,
        "username": profile.username,
        "password": profile.password,
        "charset": "utf8",
        "prefix": "",
        "schema": "public" if is_pgsql else None,
        "sslmode": "prefer" if is_pgsql else None,
    }


def _engine_from_config(config: Dict[str, Any], timeout: int) -> Engine:
    driver = config["driver"]
    port = config.get("port")
    try:
        port_number = int(port) if port not in (None, "") else None
    except (TypeError, ValueError) as e:
        raise DatabaseConnectionError(driver, f"invalid port {port!r}") from e

    connect_args: Dict[str, Any] = {"connect_timeout": timeout}
    query: Dict[str, str] = {}
    if driver == "pgsql":
        connect_args["sslmode"] = config["sslmode"]
        connect_args["options"] = f"-csearch_path={config['schema']}"
        connect_args["client_encoding"] = config["charset"]
    else:
        query["charset"] = config["charset"]

    url = URL.create(
        SQLALCHEMY_DRIVERS[driver],
        username=config.get("username") or None,
        password=config.get("password") or None,
        host=config.get("host") or None,
        port=port_number,
        database=config.get("database") or None,
        query=query,
    )
    return create_engine(url, poolclass=NullPool, connect_args=connect_args)


class ConnectionProber:
    """Opens short-lived named connections to check database credentials."""

    def __init__(self, timeout: int = 5):
        self.timeout = max(1, int(timeout or 0))
        self._engines: Dict[str, Engine] = {}

    def probe(self, profile: ConnectionProfile, name: str = PROBE_CONNECTION_NAME) -> None:
        config = build_probe_config(profile)
        logger.debug(
            "probe %s: driver=%s host=%s port=%s database=%s username=%s password_len=%s",
            name,
            config["driver"],
            config["host"],
            config["port"],
            config["database"],
            config["username"],
            len(config["password"] or ""),
        )
        result_label = "error"
        try:
            engine = _engine_from_config(config, self.timeout)
            self._engines[name] = engine
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            result_label = "ok"
        except (SQLAlchemyError, UnicodeError, ValueError, OSError) as e:
            # drivers raise some argument errors (e.g. PyMySQL's latin-1 password encode) unwrapped
            message = str(getattr(e, "orig", None) or e)
            logger.warning("probe %s: %s connection failed: %s", name, profile.driver, message)
            raise DatabaseConnectionError(profile.driver, message) from e
        finally:
            DATABASE_PROBE_TOTAL.labels(driver=profile.driver, result=result_label).inc()
        logger.info("probe %s: %s connection succeeded", name, profile.driver)

    def disconnect(self, name: str = PROBE_CONNECTION_NAME) -> None:
        engine: Optional[Engine] = self._engines.pop(name, None)
        if engine is not None:
            engine.dispose()
            logger.debug("probe %s: disposed", name)
