"""Helpers to validate raw server payloads against their wire schemas."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from playerdeck.constants import DECK_LOGGER_NAME
from playerdeck.models.errors import ValidationError

LOGGER = logging.getLogger(f"{DECK_LOGGER_NAME}.validation")


def validate_response[ModelT: BaseModel](model: type[ModelT], data: Any, operation: str) -> ModelT:
    """Validate a raw payload into the given schema, failing the operation on mismatch."""
    try:
        return model.model_validate(data)
    except PydanticValidationError as err:
        detailed_errors = err.errors(include_url=False)
        LOGGER.warning(
            "Validation error for %s (%s): %s", operation, model.__name__, detailed_errors
        )
        msg = f"Invalid {model.__name__} payload received for {operation}"
        raise ValidationError(msg, errors=[dict(x) for x in detailed_errors]) from err


def validate_list[ModelT: BaseModel](
    model: type[ModelT], data: Any, operation: str
) -> list[ModelT]:
    """Validate a raw list payload, failing the whole operation on any invalid item."""
    if not isinstance(data, list):
        msg = f"Expected a list of {model.__name__} for {operation}"
        raise ValidationError(msg)
    return [validate_response(model, item, operation) for item in data]
