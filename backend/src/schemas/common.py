"""Shared base for request/response schemas."""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base schema that uses camelCase on the wire (firstName, createdAt, ...).

    Snake_case field names are still accepted on input, and ORM objects can be
    validated directly via from_attributes.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
