"""Shared schema base classes for API payloads."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accept snake_case or camelCase input and serialize camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FrozenCamelModel(CamelModel):
    """Immutable variant for values passed between pipeline stages."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)
