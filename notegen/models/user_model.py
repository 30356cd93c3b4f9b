# /notegen/models/user_model.py

from pydantic import BaseModel, ConfigDict, Field


class UserCreate(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class User(BaseModel):
    """The public view of a user; the password hash never leaves the service layer."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
