"""Response envelope shared by every endpoint."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DataT = TypeVar("DataT")


class ApiModel(BaseModel):
    """Base for wire models: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Envelope(ApiModel, Generic[DataT]):
    """Successful response: ``{success, message?, data?}``."""

    success: bool = Field(default=True, description="Always true for successful responses")
    message: str | None = Field(default=None, description="Optional human-readable note")
    data: DataT | None = Field(default=None, description="Endpoint-specific payload")


class ErrorResponse(BaseModel):
    """Error response rendered by the exception handlers."""

    success: bool = Field(default=False, description="Always false for errors")
    code: str = Field(description="Machine-readable error identifier")
    message: str = Field(description="Human-readable error message")
    details: Any | None = Field(
        default=None,
        description="Optional structured metadata describing the error context.",
    )


__all__ = ["ApiModel", "Envelope", "ErrorResponse"]
