"""Shared base model for provider payloads (camelCase on the wire)."""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from alchemykit.utils.exceptions import DecodeError

M = TypeVar("M", bound=BaseModel)


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    def to_wire(self) -> dict[str, Any]:
        """Serialize with wire aliases, omitting unset optionals."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


def decode_model(model: type[M], data: Any, source: str) -> M:
    """Validate a decoded JSON payload into ``model``; shape mismatches raise DecodeError."""
    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        raise DecodeError(f"{source}: cannot decode {model.__name__}: {exc}", body=str(data)) from exc
