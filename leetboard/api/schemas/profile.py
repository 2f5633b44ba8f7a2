from pydantic import BaseModel
from pydantic import Field


class ProfileCreate(BaseModel):
    username: str = Field(min_length=1, max_length=100)


class ProfileOut(BaseModel):
    user_id: str
    username: str
