from __future__ import annotations

import logging
import pathlib
from typing import Mapping, Optional

from dotenv import set_key


logger = logging.getLogger(__name__)


class EnvironmentFileMissingError(RuntimeError):
    """Raised when the .env file the writer should update does not exist."""

    def __init__(self, path: pathlib.Path):
        super().__init__("Cannot locate .env file, was this software installed correctly?")
        self.path = path


class EnvironmentWriter:
    """Writes KEY=value pairs into an existing .env file, replacing or appending lines."""

    def __init__(self, path: str | pathlib.Path = ".env"):
        path = pathlib.Path(path).expanduser()
        if not path.is_absolute():
            path = pathlib.Path.cwd() / path
        self.path = path

    def write(self, values: Mapping[str, Optional[object]]) -> None:
        if not self.path.exists():
            raise EnvironmentFileMissingError(self.path)

        for key, value in values.items():
            set_key(
                self.path,
                key.upper(),
                "" if value is None else str(value),
                quote_mode="auto",
            )
        logger.info("environment: wrote keys %s to %s", sorted(k.upper() for k in values), self.path)
