from __future__ import annotations

import pytest
from dotenv import dotenv_values

from panel.core.environment import EnvironmentFileMissingError, EnvironmentWriter


def test_write_replaces_and_appends(env_file):
    env_file.write_text("APP_NAME=Panel\nDB_CONNECTION=sqlite\nDB_DATABASE=database.sqlite\n", encoding="utf-8")
    writer = EnvironmentWriter(env_file)

    writer.write({"DB_CONNECTION": "mysql", "db_host": "127.0.0.1", "DB_PASSWORD": None})

    values = dotenv_values(env_file)
    assert values == {
        "APP_NAME": "Panel",
        "DB_CONNECTION": "mysql",
        "DB_DATABASE": "database.sqlite",
        "DB_HOST": "127.0.0.1",
        "DB_PASSWORD": "",
    }
    assert env_file.read_text(encoding="utf-8").count("DB_CONNECTION=") == 1


def test_values_with_spaces_survive(env_file):
    EnvironmentWriter(env_file).write({"DB_PASSWORD": "correct horse # battery"})
    assert dotenv_values(env_file)["DB_PASSWORD"] == "correct horse # battery"


def test_missing_file_is_an_error(tmp_path):
    writer = EnvironmentWriter(tmp_path / ".env")

    with pytest.raises(EnvironmentFileMissingError) as exc:
        writer.write({"DB_CONNECTION": "sqlite"})
    assert "Cannot locate .env file" in str(exc.value)
    assert not (tmp_path / ".env").exists()
