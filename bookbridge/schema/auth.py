from datetime import datetime
from pydantic import AliasChoices, Field
from bookbridge.schema.base import Record


class Account(Record):
    id: str
    name: str
    email: str
    username: str
    # early installs stored the digest under "password"
    password_hash: str = Field(alias="passwordHash", validation_alias=AliasChoices("passwordHash", "password"))
    contact: str = ""
    created_at: datetime
    updated_at: datetime
    is_verified: bool = False
    role: str = "USER"


class Session(Record):
    id: str
    user_id: str
    token: str
    created_at: datetime
    expires_at: datetime


class RefreshToken(Record):
    id: str
    user_id: str
    token: str
    created_at: datetime
    expires_at: datetime
    is_revoked: bool = False


class VerificationToken(Record):
    id: str
    token: str
    type: str
    email: str
    created_at: datetime
    expires_at: datetime
