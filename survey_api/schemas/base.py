"""Base schema shared by all request and response bodies.

The API speaks camelCase JSON while Python attributes stay snake_case.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Pydantic model that reads and writes camelCase keys.

    Snake_case names are accepted on input as well, and instances can be
    built straight from ORM objects.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        str_strip_whitespace=True,
    )


class MessageResponse(CamelModel):
    """Plain acknowledgement body."""
    message: str
