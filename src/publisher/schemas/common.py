"""Shared pydantic base for the API schemas.

Learn: the wire format is camelCase (firstName, penName) while Python
code stays snake_case. The alias generator maps between them; FastAPI
serializes response models by alias.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
