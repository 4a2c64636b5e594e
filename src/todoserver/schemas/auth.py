"""Pydantic schemas for registration, login and the current user.

Request fields are all optional at the schema level: a missing field is a
field-rule violation reported by AuthService with the others, not a parse
failure. Response models never include the password hash.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class RegisterRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserPublic(BaseModel):
    id: uuid.UUID
    name: str
    email: str

    model_config = ConfigDict(
        from_attributes=True, alias_generator=to_camel, populate_by_name=True
    )


class UserProfile(UserPublic):
    created_at: Optional[datetime] = None


class AuthResponse(BaseModel):
    message: str
    token: str
    user: UserPublic


class MeResponse(BaseModel):
    user: UserProfile


class MessageResponse(BaseModel):
    message: str
