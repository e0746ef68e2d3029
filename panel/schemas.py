from __future__ import annotations

import re
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError, field_validator
from pydantic_core import PydanticCustomError


DATABASE_DRIVERS: Dict[str, str] = {
    "sqlite": "SQLite (recommended)",
    "mariadb": "MariaDB",
    "mysql": "MySQL",
    "pgsql": "PostgreSQL",
}
NETWORK_DRIVERS = ("mariadb", "mysql", "pgsql")

# Keys the daemon injects into every server environment; eggs may not redefine them.
RESERVED_ENV_NAMES = (
    "SERVER_MEMORY",
    "SERVER_IP",
    "SERVER_PORT",
    "ENV",
    "HOME",
    "USER",
    "STARTUP",
    "SERVER_UUID",
    "UUID",
)
ENV_VARIABLE_PATTERN = re.compile(r"[\w]{1,255}", re.ASCII)


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple, dict)):
        return len(value) == 0
    return False


class ConnectionProfile(BaseModel):
    """Connection parameters collected during one wizard pass."""
    driver: str
    host: Optional[str] = None
    port: Optional[str] = None
    database: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None

    @property
    def is_network(self) -> bool:
        return self.driver in NETWORK_DRIVERS

    def to_environment(self) -> Dict[str, Optional[str]]:
        if not self.is_network:
            return {"DB_CONNECTION": self.driver, "DB_DATABASE": self.database}
        return {
            "DB_CONNECTION": self.driver,
            "DB_HOST": self.host,
            "DB_PORT": self.port,
            "DB_DATABASE": self.database,
            "DB_USERNAME": self.username,
            "DB_PASSWORD": self.password,
        }


class EggVariableFormRequest(BaseModel):
    """Environment variable definition submitted for an egg."""
    model_config = ConfigDict(extra="ignore")

    name: StrictStr = Field(min_length=1, max_length=255)
    description: Optional[StrictStr] = None
    env_variable: StrictStr
    # may be omitted, but not null or empty when sent
    options: Optional[List[Any]] = None
    rules: StrictStr
    # must be present; null and "" are fine
    default_value: Any

    @field_validator("name", "env_variable", "rules", "options", mode="before")
    @classmethod
    def _required(cls, value: Any) -> Any:
        if _is_blank(value):
            raise PydanticCustomError("required", "field is required")
        return value

    @field_validator("env_variable")
    @classmethod
    def _env_variable(cls, value: str) -> str:
        if not ENV_VARIABLE_PATTERN.fullmatch(value):
            raise PydanticCustomError("env_variable_format", "format is invalid")
        if value in RESERVED_ENV_NAMES:
            raise PydanticCustomError("env_variable_reserved", "name is reserved")
        return value


class EggVariableValidation(BaseModel):
    accepted: bool
    variable: Optional[EggVariableFormRequest] = None
    errors: Dict[str, List[str]] = Field(default_factory=dict)


_MESSAGES = {
    "missing": "The {attribute} field is required.",
    "required": "The {attribute} field is required.",
    "string_type": "The {attribute} field must be a string.",
    "list_type": "The {attribute} field must be an array.",
    "string_too_long": "The {attribute} field must not be greater than {max_length} characters.",
    "string_too_short": "The {attribute} field must be at least {min_length} characters.",
    "env_variable_format": "The {attribute} field format is invalid.",
    "env_variable_reserved": "The selected {attribute} is invalid.",
}
_FIELD_MESSAGES = {
    ("default_value", "missing"): "The {attribute} field must be present.",
}


def _error_message(field: str, error: Mapping[str, Any]) -> str:
    kind = error.get("type", "")
    template = _FIELD_MESSAGES.get((field, kind)) or _MESSAGES.get(kind)
    if template is None:
        return str(error.get("msg", "is invalid"))
    ctx = dict(error.get("ctx") or {})
    return template.format(attribute=field.replace("_", " "), **ctx)


def validation_errors(exc: ValidationError) -> Dict[str, List[str]]:
    """Convert a pydantic error list into a field-keyed map of form-style messages."""
    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        loc = error.get("loc") or ()
        field = str(loc[0]) if loc else "payload"
        message = _error_message(field, error)
        if message not in errors.setdefault(field, []):
            errors[field].append(message)
    return errors


def validate_egg_variable(payload: Mapping[str, Any]) -> EggVariableValidation:
    """Check an egg variable definition against the form rules.

    Every failing field is reported; nothing is raised for invalid input.
    """
    try:
        variable = EggVariableFormRequest.model_validate(dict(payload))
    except ValidationError as exc:
        return EggVariableValidation(accepted=False, errors=validation_errors(exc))
    return EggVariableValidation(accepted=True, variable=variable)
