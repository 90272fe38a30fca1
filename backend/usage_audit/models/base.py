"""Base schema with camelCase serialization.

The usage store and the HTTP API both speak camelCase (``userId``,
``totalSessions``); Python code uses snake_case attributes.
"""

from pydantic import BaseModel, ConfigDict


def to_camel(string: str) -> str:
    """Convert snake_case to camelCase."""
    head, *rest = string.split("_")
    return head + "".join(part.title() for part in rest)


class BaseSchema(BaseModel):
    """Base for every store and API model."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )
