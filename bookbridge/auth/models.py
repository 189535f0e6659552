from email_validator import validate_email, EmailNotValidError
from pydantic import BaseModel, Field, field_validator
from bookbridge.schema.auth import Account
from bookbridge.schema.base import Record


def normalize_email_address(email: str) -> str:
    """Syntax check and lower-case; no DNS lookups on device. Raises ValueError if invalid."""
    try:
        v = validate_email(email.strip(), check_deliverability=False)
        return v.normalized.lower()
    except EmailNotValidError as e:
        raise ValueError(str(e))


class SignupIn(BaseModel):
    name: str = Field(..., min_length=1, examples=["Full Name"])
    email: str = Field(..., examples=["user@example.com"])
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    contact: str = ""

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, v: str) -> str:
        return normalize_email_address(v)


class SignIn(BaseModel):
    username: str = Field(...)
    password: str = Field(...)


class PublicAccount(Record):
    """Account as shown to the UI; never carries the password hash."""
    id: str
    name: str
    email: str
    username: str
    contact: str = ""
    is_verified: bool = False
    role: str = "USER"

    @classmethod
    def from_account(cls, account: Account) -> "PublicAccount":
        return cls.model_validate(account.model_dump(exclude={"password_hash", "created_at", "updated_at"}))


class TokenPair(BaseModel):
    token: str
    refresh_token: str


class AuthResult(TokenPair):
    user: PublicAccount
