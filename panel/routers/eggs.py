from __future__ import annotations

from typing import Any, Dict
import logging

from fastapi import APIRouter, Body
from fastapi.responses import JSONResponse

from panel.metrics import EGG_VARIABLE_VALIDATION_TOTAL
from panel.schemas import validate_egg_variable

router = APIRouter(prefix="/api/eggs", tags=["eggs"])
logger = logging.getLogger(__name__)


@router.post("/{egg_id}/variables/validate")
async def egg_variable_validate(egg_id: int, payload: Dict[str, Any] = Body(...)) -> JSONResponse:
    """Validate a variable definition before the egg is saved.

    Persisting the variable is left to the caller; this only answers whether
    the definition is acceptable and, if not, why.
    """
    result = validate_egg_variable(payload)
    EGG_VARIABLE_VALIDATION_TOTAL.labels(result="accepted" if result.accepted else "rejected").inc()

    if not result.accepted:
        logger.info("egg %s: variable rejected, fields=%s", egg_id, list(result.errors))
        first = next(iter(result.errors.values()))[0]
        extra = sum(len(v) for v in result.errors.values()) - 1
        message = first if extra <= 0 else f"{first} (and {extra} more error{'s' if extra > 1 else ''})"
        return JSONResponse(status_code=422, content={"message": message, "errors": result.errors})

    variable = result.variable.model_dump()
    logger.info("egg %s: variable %s accepted", egg_id, variable["env_variable"])
    return JSONResponse(content={"ok": True, "variable": variable})
