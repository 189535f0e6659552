from datetime import datetime
from typing import List, Optional
from bookbridge.auth.constants import logger
from bookbridge.common.custom_exceptions import DuplicateIdentity
from bookbridge.schema.auth import Account, RefreshToken, Session, VerificationToken
from bookbridge.storage.collection import Collection, Storage
from bookbridge.storage.constants import ACCOUNTS_KEY, REFRESH_TOKENS_KEY, SESSIONS_KEY, VERIFICATION_TOKENS_KEY


def same_email(stored: str, email: str) -> bool:
    # rows written by older installs keep the email exactly as typed
    return stored.strip().lower() == email.strip().lower()


def accounts(storage: Storage) -> Collection[Account]:
    return storage.collection(ACCOUNTS_KEY, Account)

def sessions(storage: Storage) -> Collection[Session]:
    return storage.collection(SESSIONS_KEY, Session)

def refresh_tokens(storage: Storage) -> Collection[RefreshToken]:
    return storage.collection(REFRESH_TOKENS_KEY, RefreshToken)

def verification_tokens(storage: Storage) -> Collection[VerificationToken]:
    return storage.collection(VERIFICATION_TOKENS_KEY, VerificationToken)


async def insert_account(storage: Storage, account: Account) -> Account:
    """Append the account unless its email or username is taken (checked in the same write cycle)."""

    def insert(items: List[Account]):
        if any(same_email(a.email, account.email) for a in items):
            logger.warning("user.duplicate.email", extra={"email": account.email})
            raise DuplicateIdentity("email")
        if any(a.username == account.username for a in items):
            logger.warning("user.duplicate.username", extra={"username": account.username})
            raise DuplicateIdentity("username")
        return items + [account], account

    return await accounts(storage).mutate(insert)


async def account_by_username(storage: Storage, username: str) -> Optional[Account]:
    for a in await accounts(storage).load():
        if a.username == username:
            return a
    return None

async def account_by_id(storage: Storage, account_id: str) -> Optional[Account]:
    for a in await accounts(storage).load():
        if a.id == account_id:
            return a
    return None


async def update_password_hash(storage: Storage, account_id: str, new_hash: str, at: datetime) -> None:

    def apply(items: List[Account]):
        return [
            a.model_copy(update={"password_hash": new_hash, "updated_at": at}) if a.id == account_id else a
            for a in items
        ], None

    await accounts(storage).mutate(apply)


async def mark_email_verified(storage: Storage, email: str, at: datetime) -> int:
    """Verify every account registered with this email; returns how many changed."""

    def apply(items: List[Account]):
        out, changed = [], 0
        for a in items:
            if same_email(a.email, email) and not a.is_verified:
                a = a.model_copy(update={"is_verified": True, "updated_at": at})
                changed += 1
            out.append(a)
        return out, changed

    return await accounts(storage).mutate(apply)


async def save_session(storage: Storage, session: Session) -> None:
    await sessions(storage).mutate(lambda items: (items + [session], None))

async def session_by_token(storage: Storage, token: str) -> Optional[Session]:
    for s in await sessions(storage).load():
        if s.token == token:
            return s
    return None

async def expire_all_sessions(storage: Storage, at: datetime) -> int:
    """Set expires_at = at on every session still alive at `at`. Rows are kept."""

    def apply(items: List[Session]):
        out, changed = [], 0
        for s in items:
            if s.expires_at > at:
                s = s.model_copy(update={"expires_at": at})
                changed += 1
            out.append(s)
        return out, changed

    return await sessions(storage).mutate(apply)

async def purge_expired_sessions(storage: Storage, at: datetime) -> int:

    def apply(items: List[Session]):
        alive = [s for s in items if at < s.expires_at]
        return alive, len(items) - len(alive)

    return await sessions(storage).mutate(apply)


async def save_refresh_token(storage: Storage, row: RefreshToken) -> None:
    await refresh_tokens(storage).mutate(lambda items: (items + [row], None))

async def refresh_token_by_value(storage: Storage, token: str) -> Optional[RefreshToken]:
    for r in await refresh_tokens(storage).load():
        if r.token == token:
            return r
    return None

async def revoke_refresh_token(storage: Storage, token: str) -> bool:
    """True if this call flipped the token from active to revoked."""

    def apply(items: List[RefreshToken]):
        out, flipped = [], False
        for r in items:
            if r.token == token and not r.is_revoked:
                r = r.model_copy(update={"is_revoked": True})
                flipped = True
            out.append(r)
        return out, flipped

    return await refresh_tokens(storage).mutate(apply)


async def save_verification_token(storage: Storage, row: VerificationToken) -> None:
    await verification_tokens(storage).mutate(lambda items: (items + [row], None))

async def consume_verification_token(storage: Storage, token: str, token_type: str,
                                     at: datetime) -> Optional[VerificationToken]:
    """Remove and return the token if it is live and of token_type; None otherwise.

    Lookup and removal share one write cycle, so a token is consumed at most once.
    """

    def apply(items: List[VerificationToken]):
        for t in items:
            if t.token == token and t.type == token_type and at < t.expires_at:
                return [it for it in items if it is not t], t
        return items, None

    return await verification_tokens(storage).mutate(apply)
