"""Shared pydantic base for console models.

Weaviate and the browser UI both speak camelCase JSON, so every model
serialises with camelCase aliases while Python code uses snake_case names.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Immutable model with camelCase wire names."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)
