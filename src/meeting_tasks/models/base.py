"""Shared base for wire models exchanged with the backend."""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """
    Base model for backend payloads.

    The backend speaks camelCase JSON; attributes stay snake_case. Unknown
    fields are ignored so additive backend changes do not break decoding.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra='ignore',
    )

    def to_payload(self) -> dict[str, Any]:
        """Serialize for a request body, dropping unset optional fields."""
        return self.model_dump(mode='json', by_alias=True, exclude_none=True)
