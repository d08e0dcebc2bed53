"""
Shared model configuration.
"""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from asana_tree.exceptions import AsanaValidationError

M = TypeVar("M", bound="AsanaModel")


class AsanaModel(BaseModel):
    """Base model for immutable Asana records."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
    )

    @classmethod
    def from_api(cls: type[M], data: Any) -> M:
        """
        Build a record from a raw API object.

        Raises:
            AsanaValidationError: If the object does not have the expected shape
        """
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise AsanaValidationError(
                f"Malformed {cls.__name__.lower()} in API response",
                details={"errors": e.error_count(), "data": data},
            ) from e


def gid_field() -> Any:
    """Identifier field accepting both 'gid' (API) and 'id' (cache)."""
    return Field(..., validation_alias=AliasChoices("id", "gid"), min_length=1)
