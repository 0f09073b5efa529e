# app/schemas/base.py
from dataclasses import dataclass, field
from typing import Any, Generic, List, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError

from app.core.errors import format_validation_errors


def to_camel(s: str) -> str:
    parts = s.split("_")
    return parts[0] + "".join(p.title() for p in parts[1:])


class BaseSchema(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        str_strip_whitespace=True,
    )


class InputSchema(BaseSchema):
    """Request bodies: unknown keys are rejected."""

    model_config = ConfigDict(extra="forbid")


S = TypeVar("S", bound=BaseModel)


@dataclass
class Validated(Generic[S]):
    value: Optional[S] = None
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def validate(schema: Type[S], data: Mapping[str, Any]) -> Validated[S]:
    """Validate ``data`` against ``schema`` without raising.

    Returns the parsed model, or the readable error messages
    (``"itemName: String should have at least 1 character"``).
    """
    try:
        return Validated(value=schema.model_validate(data))
    except ValidationError as e:
        return Validated(errors=format_validation_errors(e.errors()))
