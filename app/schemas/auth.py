from datetime import datetime
from pydantic import BaseModel, ConfigDict
from typing import Optional
from app.models.user import Role


class LoginRequest(BaseModel):
    username: str
    password: str


class UserCreate(BaseModel):
    username: str
    password: str
    role: Role = Role.USER


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    role: Role
    created_at: datetime


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: Optional[int] = None
    username: str
    role: Role


class TokenPayload(BaseModel):
    sub: str
    exp: int
    role: Optional[Role] = None
