"""Base model for Schwab wire payloads"""

from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator


class WireModel(BaseModel):
    """Pydantic base for Schwab JSON payloads

    Fields are declared with snake_case names and the platform's exact
    keys as aliases. Explicit ``null`` values fall back to the field
    default, matching how the platform omits and nulls fields interchangeably.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="ignore",
    )

    @field_validator("*", mode="before")
    @classmethod
    def null_to_default(cls, v: Any, info: ValidationInfo) -> Any:
        if v is None and info.field_name is not None:
            field = cls.model_fields[info.field_name]
            if not field.is_required():
                return field.get_default(call_default_factory=True)
        return v
