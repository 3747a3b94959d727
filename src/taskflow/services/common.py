"""Helpers shared by the service layer."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..errors import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


def validation_details(exc: PydanticValidationError) -> dict[str, Any]:
    return {
        "errors": [
            {"field": ".".join(str(part) for part in error["loc"]), "message": error["msg"]}
            for error in exc.errors()
        ]
    }


def build_model(model: type[ModelT], data: Mapping[str, Any]) -> ModelT:
    """Validate ``data`` as ``model``, reporting failures as ``ValidationError``."""

    try:
        return model.model_validate(dict(data))
    except PydanticValidationError as exc:
        raise ValidationError(details=validation_details(exc)) from exc


def merge_changes(entity: ModelT, changes: Mapping[str, Any], *, now: datetime) -> ModelT:
    """Return a re-validated copy of ``entity`` with ``changes`` applied."""

    merged = build_model(type(entity), {**entity.model_dump(), **changes})
    merged.touch(now)  # type: ignore[attr-defined]
    return merged


def changed_fields(merged: BaseModel, changes: Mapping[str, Any]) -> dict[str, Any]:
    """The validated values of ``changes`` on ``merged``, plus its ``updated_at``."""

    fields = {name: getattr(merged, name) for name in changes}
    fields["updated_at"] = merged.updated_at  # type: ignore[attr-defined]
    return fields


def require_fields(missing: list[str], message: str) -> None:
    if missing:
        raise ValidationError(message, details={"missing": missing})


__all__ = ["build_model", "changed_fields", "merge_changes", "require_fields", "validation_details"]
