"""Shared pydantic base for records exchanged with the chart front end."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Immutable record serialized with camelCase field names.

    Python code uses snake_case attributes; documents written by the chart
    (``lineWidth``, ``startTime``, ``createdAt``...) keep their original
    names. Both spellings are accepted on input.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_document(self) -> dict:
        """Dump to a JSON-compatible dict using the camelCase field names."""
        return self.model_dump(mode="json", by_alias=True)
