from datetime import datetime, timedelta
import secrets
from typing import Optional, Tuple
from passlib.context import CryptContext
from jose import jwt, JWTError
from bookbridge.auth.constants import LEGACY_HASH_SCHEME
from bookbridge.config.settings import config_settings

PASS_HASH_SCHEME = config_settings.PASS_HASH_SCHEME
TOKEN_SECRET = config_settings.TOKEN_SECRET
TOKEN_ALGO = config_settings.TOKEN_ALGO

# first scheme hashes new passwords; the legacy one only verifies old rows
pwd_context = CryptContext(schemes=list(dict.fromkeys([PASS_HASH_SCHEME, LEGACY_HASH_SCHEME])), deprecated="auto")

def hash_password(plain_password: str) -> str:
    return pwd_context.hash(plain_password)

def verify_password(plain_password: str, password_hash: str) -> Tuple[bool, Optional[str]]:
    """(matches, replacement hash when the stored one uses a deprecated scheme)"""
    try:
        return pwd_context.verify_and_update(plain_password, password_hash)
    except ValueError:
        # unidentifiable hash string
        return False, None

def dummy_verify() -> None:
    """Spend the time of one verification so unknown usernames answer as slowly as wrong passwords."""
    pwd_context.dummy_verify()


def create_token(user_id: str, token_type: str, issued_at: datetime, ttl_seconds: int) -> str:
    expiry = issued_at + timedelta(seconds=ttl_seconds)
    payload = {
        "sub": str(user_id),
        "iat": int(issued_at.timestamp()),
        "exp": int(expiry.timestamp()),
        "jti": secrets.token_hex(16),
        "typ": token_type,
    }
    return jwt.encode(claims=payload, key=TOKEN_SECRET, algorithm=TOKEN_ALGO)

def decode_token(token: str):
    """Claims of a token minted by this device, or None.

    Expiry is not checked here: callers compare "exp" with their own clock.
    """
    try:
        return jwt.decode(
            token,
            key=TOKEN_SECRET,
            algorithms=[TOKEN_ALGO],
            options={"verify_exp": False},
        )
    except JWTError:
        return None

def token_expired(claims: dict, at: datetime) -> bool:
    return int(at.timestamp()) >= int(claims.get("exp", 0))


def generate_plain_token(nbytes: int = 32) -> str:
    return secrets.token_urlsafe(nbytes)
