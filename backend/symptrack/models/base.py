from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def ensure_aware(value: datetime) -> datetime:
    """Treat naive timestamps as UTC so every stored datetime is comparable."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class CamelModel(BaseModel):
    """Base for wire models: snake_case attributes, camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
