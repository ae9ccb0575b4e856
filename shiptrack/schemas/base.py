"""
Base Pydantic Schemas
=====================

Base class for every request/response schema. JSON keys are camelCase,
Python attributes snake_case; both spellings are accepted on input.
"""

from typing import Any, ClassVar, Dict, Tuple

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """Base schema: ORM-friendly, camelCase on the wire."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra='ignore',
    )

    # Keys compared verbatim; passwords are always left alone
    unstripped_fields: ClassVar[Tuple[str, ...]] = ()

    @model_validator(mode='before')
    @classmethod
    def strip_whitespace(cls, data: Any) -> Any:
        """Strip whitespace from string fields before validation. Returns a new dict."""
        if not isinstance(data, dict):
            return data
        return {
            key: value.strip() if cls.strips_value(key, value) else value
            for key, value in data.items()
        }

    @classmethod
    def strips_value(cls, key: Any, value: Any) -> bool:
        if not isinstance(value, str) or not isinstance(key, str):
            return False
        return 'password' not in key.lower() and key not in cls.unstripped_fields

    @classmethod
    def serialize(cls, obj: Any) -> Dict[str, Any]:
        """ORM object (or dict) -> JSON-ready dict with camelCase keys."""
        return cls.model_validate(obj).model_dump(by_alias=True, mode='json')
