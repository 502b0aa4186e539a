from __future__ import annotations

from pydantic import BaseModel, ConfigDict, model_validator

# SQLite INTEGER is signed 64-bit; larger ints cannot be bound
MAX_INT = 2**63 - 1
MAX_LIMIT = 1000
MAX_PAGE = MAX_INT // MAX_LIMIT


class PartialUpdate(BaseModel):
    """Base for PUT bodies: every field optional, but at least one present and none null."""

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="before")
    @classmethod
    def _at_least_one_field(cls, data):
        if isinstance(data, dict):
            if not data:
                raise ValueError("at least one field must be provided")
            for k, v in data.items():
                if v is None:
                    raise ValueError(f"{k} must not be null")
        return data

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)
