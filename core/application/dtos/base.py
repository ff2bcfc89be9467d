"""Base DTO configuration shared by request and response models."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts camelCase (gateway payloads) and snake_case keys; dumps camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
