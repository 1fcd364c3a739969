from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Schema exchanged with the admin client; fields travel in camelCase"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True
