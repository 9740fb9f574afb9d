"""Shared pydantic base for persisted entities."""

from __future__ import annotations

from typing import Any, Self

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class StorageModel(BaseModel):
    """Entity persisted as a JSON row.

    Python attributes are snake_case; rows use the camelCase names of the
    on-disk format (``projectId``, ``watcherIds``...). Either spelling is
    accepted on input.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_row(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> Self:
        return cls.model_validate(row)


class PatchModel(BaseModel):
    """Partial update input. Only explicitly set fields are applied."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def changes(self) -> dict[str, Any]:
        """Return the explicitly set fields keyed by python attribute name."""
        return self.model_dump(mode="json", exclude_unset=True)
