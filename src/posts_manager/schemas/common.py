"""Shared Pydantic base for wire models."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base model for payloads exchanged with the REST backend.

    The backend speaks camelCase JSON; attributes stay snake_case in Python.
    Unknown fields sent by the backend are ignored.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_wire(self) -> dict[str, object]:
        """Dump the model as camelCase JSON-compatible data."""
        return self.model_dump(mode="json", by_alias=True)
