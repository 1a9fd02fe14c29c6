from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class APIModel(BaseModel):
    """Base schema: camelCase on the wire, snake_case accepted on input"""

    class Config:
        from_attributes = True
        populate_by_name = True
        alias_generator = to_camel


class MessageResponse(APIModel):
    message: str
