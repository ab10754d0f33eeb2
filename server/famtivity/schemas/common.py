"""Common Pydantic schemas and input coercion helpers."""

import re
from typing import Annotated, Any, Optional, TypeVar

from pydantic import BaseModel, BeforeValidator, Field, PrivateAttr
from pydantic import ValidationError as PydanticValidationError

from ..core.exceptions import BackendError, ValidationError

M = TypeVar("M", bound=BaseModel)

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
_WHOLE_NUMBER = re.compile(r"^\s*\d+\s*$")


def coerce_whole_number(value: Any) -> int:
    """
    Accept an int or a string of digits; reject everything else.

    Form fields arrive as strings, so "4" is accepted, but "4.5", "four"
    and "" are rejected rather than parsed leniently.
    """
    if isinstance(value, bool):
        raise ValueError("must be a whole number")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _WHOLE_NUMBER.match(value):
        return int(value)
    raise ValueError("must be a whole number")


WholeNumber = Annotated[int, BeforeValidator(coerce_whole_number)]


def blank_to_none(value: Any) -> Any:
    """Treat an empty or whitespace-only string as an omitted value."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


def number_to_text(value: Any) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


# Free-form amount that may arrive as a number or as a band like "100-250"
AmountText = Annotated[str, BeforeValidator(number_to_text)]


class Violation(BaseModel):
    """Validation error violation."""

    path: str = Field(..., description="Dotted path to the invalid field")
    message: str = Field(..., description="Validation error message")


def validate_payload(schema: type[M], data: Any) -> M:
    """
    Validate ``data`` against ``schema``.

    Raises:
        ValidationError: carrying one violation per invalid field
    """
    if isinstance(data, schema):
        return data
    try:
        return schema.model_validate(data)
    except PydanticValidationError as e:
        violations = [
            Violation(
                path=".".join(str(part) for part in error["loc"]) or "__root__",
                message=error["msg"],
            ).model_dump()
            for error in e.errors()
        ]
        raise ValidationError(
            detail=f"{schema.__name__} failed validation",
            violations=violations,
        ) from e


class Envelope(BaseModel):
    """Uniform result of every data-access operation."""

    success: bool = Field(..., description="Whether the operation succeeded")
    data: Any = Field(None, description="Operation payload on success")
    error: Optional[str] = Field(None, description="Human-readable error message on failure")
    code: Optional[str] = Field(None, description="Error kind on failure")
    details: Optional[dict[str, Any]] = Field(None, description="Structured error context")

    _status_code: int = PrivateAttr(default=200)

    @classmethod
    def ok(cls, data: Any, status_code: int = 200) -> "Envelope":
        envelope = cls(success=True, data=data)
        envelope._status_code = status_code
        return envelope

    @classmethod
    def failure(cls, exc: BackendError) -> "Envelope":
        details = {k: v for k, v in exc.extensions.items() if k != "code"}
        envelope = cls(
            success=False,
            error=exc.message,
            code=exc.code,
            details=details or None,
        )
        envelope._status_code = exc.status_code
        return envelope

    @property
    def status_code(self) -> int:
        return self._status_code
