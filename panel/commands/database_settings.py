#!/usr/bin/env python3
"""
Configure database settings for the Panel.

Collects the connection parameters (from flags or prompts), probes the
connection for networked drivers and writes the DB_* keys into `.env`.
"""
from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from panel.commands.prompts import ConsolePrompter, MissingInputError
from panel.core.config import Settings, get_settings
from panel.core.environment import EnvironmentFileMissingError, EnvironmentWriter
from panel.schemas import DATABASE_DRIVERS, NETWORK_DRIVERS, ConnectionProfile
from panel.services.database import ConnectionProber, DatabaseConnectionError


logger = logging.getLogger(__name__)

DB_HOST_NOTE = (
    'It is highly recommended to not use "localhost" as your database host as we have seen '
    'frequent socket connection issues. If you want to use a local connection you should be '
    'using "127.0.0.1".'
)
DB_USERNAME_NOTE = (
    "Using the root account for database connections is not only highly frowned upon, it is "
    "also not allowed by this application. You'll need to have created a database user for "
    "this software."
)
DB_PASSWORD_KEEP = "It appears you already have a database connection password defined, would you like to keep it?"
DB_ERROR_NOT_SAVED = (
    "Your connection credentials have NOT been saved. You will need to provide valid "
    "connection information before proceeding."
)
GO_BACK = "Go back and try again?"


@dataclass
class DatabaseSettingsOptions:
    """Values supplied on the command line; None means ask."""
    driver: Optional[str] = None
    database: Optional[str] = None
    host: Optional[str] = None
    port: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None


class DatabaseSettingsWizard:
    def __init__(
        self,
        prompter: ConsolePrompter,
        settings: Settings,
        prober: ConnectionProber,
        writer: EnvironmentWriter,
        on_persisted: Optional[Callable[[], None]] = None,
    ):
        self.prompter = prompter
        self.settings = settings
        self.prober = prober
        self.writer = writer
        self.on_persisted = on_persisted

    def run(self, options: Optional[DatabaseSettingsOptions] = None) -> int:
        options = options or DatabaseSettingsOptions()
        attempt = 0
        while True:
            attempt += 1
            profile = ConnectionProfile(driver=self._select_driver(options))
            logger.debug("database wizard: attempt %s driver=%s", attempt, profile.driver)

            if not profile.is_network:
                profile.database = options.database or self.prompter.ask(
                    "Database Path", self.settings.sqlite_path_default()
                )
                break

            self._collect_network_params(profile, options)
            try:
                self.prober.probe(profile)
            except DatabaseConnectionError as e:
                self.prompter.error(
                    "Unable to connect to the %s server using the provided credentials. "
                    'The error returned was "%s".' % (e.driver.capitalize(), e.message)
                )
                self.prompter.error(DB_ERROR_NOT_SAVED)
                self.prober.disconnect()
                if self.prompter.confirm(GO_BACK):
                    continue
                logger.info("database wizard: aborted after failed connection (attempt %s)", attempt)
                return 1
            self.prober.disconnect()
            break

        self.writer.write(profile.to_environment())
        if self.on_persisted is not None:
            self.on_persisted()
        self.prompter.info(f"Database settings have been saved to {self.writer.path}.")
        logger.info("database wizard: saved %s settings", profile.driver)
        return 0

    def _select_driver(self, options: DatabaseSettingsOptions) -> str:
        if options.driver:
            return options.driver
        selected = self.settings.DB_CONNECTION
        return self.prompter.choice(
            "Database Driver",
            DATABASE_DRIVERS,
            selected if selected in DATABASE_DRIVERS else None,
        )

    def _collect_network_params(self, profile: ConnectionProfile, options: DatabaseSettingsOptions) -> None:
        defaults = self.settings.connection_defaults(profile.driver)

        self.prompter.note(DB_HOST_NOTE)
        profile.host = options.host or self.prompter.ask("Database Host", defaults["host"])
        profile.port = options.port or self.prompter.ask("Database Port", defaults["port"])
        profile.database = options.database or self.prompter.ask("Database Name", defaults["database"])

        self.prompter.note(DB_USERNAME_NOTE)
        profile.username = options.username or self.prompter.ask("Database Username", defaults["username"])

        profile.password = self._resolve_password(options, defaults["password"])

    def _resolve_password(self, options: DatabaseSettingsOptions, existing: Optional[str]) -> str:
        if options.password is not None:
            return options.password
        if existing and self.prompter.interactive:
            if self.prompter.confirm(DB_PASSWORD_KEEP, default=True):
                return existing
        return self.prompter.secret("Database Password")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="panel-env-database",
        description="Configure database settings for the Panel.",
    )
    parser.add_argument("--driver", choices=list(DATABASE_DRIVERS), help="The database driver backend to use.")
    parser.add_argument("--database", help="The database to use.")
    parser.add_argument("--host", help="The connection address for the MySQL/MariaDB/PostgreSQL server.")
    parser.add_argument("--port", help="The connection port for the MySQL/MariaDB/PostgreSQL server.")
    parser.add_argument("--username", help="Username to use when connecting to the MySQL/MariaDB/PostgreSQL server.")
    parser.add_argument("--password", help="Password to use for the MySQL/MariaDB/PostgreSQL database.")
    parser.add_argument("--env-file", default=".env", help="Path to the environment file to update.")
    parser.add_argument(
        "-n",
        "--no-interaction",
        action="store_true",
        help="Do not ask any interactive question; use flags and defaults.",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    settings = Settings(_env_file=args.env_file)
    root_level = getattr(logging, (settings.LOG_LEVEL or "INFO").upper(), logging.INFO)
    logging.basicConfig(
        level=root_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    db_level = getattr(logging, (settings.DATABASE_LOG_LEVEL or "WARNING").upper(), logging.WARNING)
    logging.getLogger("panel.services.database").setLevel(db_level)

    writer = EnvironmentWriter(args.env_file)
    wizard = DatabaseSettingsWizard(
        prompter=ConsolePrompter(False if args.no_interaction else None),
        settings=settings,
        prober=ConnectionProber(timeout=settings.DB_PROBE_TIMEOUT_S),
        writer=writer,
        on_persisted=get_settings.cache_clear,
    )
    options = DatabaseSettingsOptions(
        driver=args.driver,
        database=args.database,
        host=args.host,
        port=args.port,
        username=args.username,
        password=args.password,
    )
    try:
        return wizard.run(options)
    except MissingInputError as e:
        logger.error("%s", e)
        return 2
    except EnvironmentFileMissingError as e:
        logger.error("%s (%s)", e, e.path)
        return 2


if __name__ == "__main__":
    sys.exit(main())
