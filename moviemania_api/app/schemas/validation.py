"""Boundary validation of request bodies against schema models."""

from typing import Any, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..core.errors import InvalidInput


ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_payload(model: Type[ModelT], data: Any) -> ModelT:
    """Validate ``data`` as ``model`` or raise ``InvalidInput``.

    The error message lists the offending fields but not their values,
    since payloads may contain passwords.
    """
    if not isinstance(data, dict):
        raise InvalidInput("Request body must be a JSON object.")
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        fields = sorted({".".join(str(part) for part in err["loc"]) or "body" for err in exc.errors()})
        raise InvalidInput(f"Missing or invalid fields: {', '.join(fields)}") from exc
