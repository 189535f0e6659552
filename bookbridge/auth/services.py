from datetime import datetime, timedelta
from typing import Callable, Tuple
from uuid6 import uuid7
from bookbridge.auth import repository as repo
from bookbridge.auth.constants import (EMAIL_VERIFICATION, REFRESH_TOKEN_TTL_SECONDS, REFRESH_TOKEN_TYPE,
                                       SESSION_TOKEN_TTL_SECONDS, SESSION_TOKEN_TYPE,
                                       VERIFICATION_TOKEN_TTL_SECONDS, logger)
from bookbridge.auth.models import AuthResult, PublicAccount, SignIn, SignupIn, TokenPair, normalize_email_address
from bookbridge.auth.utils import (create_token, decode_token, dummy_verify, generate_plain_token, hash_password,
                                   token_expired, verify_password)
from bookbridge.common.custom_exceptions import InvalidCredentials, InvalidOrExpiredToken, NotFound
from bookbridge.common.utils import now
from bookbridge.config.settings import config_settings
from bookbridge.schema.auth import Account, RefreshToken, Session, VerificationToken
from bookbridge.storage.collection import Storage


class IdentityService:
    """Accounts, sessions and refresh tokens kept on this device.

    Tokens are signed with a device-local secret. They are capability markers
    for this app, not credentials any server could check.
    """

    def __init__(self, storage: Storage, clock: Callable[[], datetime] = now):
        self._storage = storage
        self._clock = clock

    async def _issue_tokens(self, user_id: str, ts: datetime) -> Tuple[str, str]:
        session_token = create_token(user_id, SESSION_TOKEN_TYPE, ts, SESSION_TOKEN_TTL_SECONDS)
        await repo.save_session(self._storage, Session(
            id=str(uuid7()),
            user_id=user_id,
            token=session_token,
            created_at=ts,
            expires_at=ts + timedelta(seconds=SESSION_TOKEN_TTL_SECONDS),
        ))

        refresh_token = create_token(user_id, REFRESH_TOKEN_TYPE, ts, REFRESH_TOKEN_TTL_SECONDS)
        await repo.save_refresh_token(self._storage, RefreshToken(
            id=str(uuid7()),
            user_id=user_id,
            token=refresh_token,
            created_at=ts,
            expires_at=ts + timedelta(seconds=REFRESH_TOKEN_TTL_SECONDS),
            is_revoked=False,
        ))
        return session_token, refresh_token

    async def register(self, payload: SignupIn) -> AuthResult:
        ts = self._clock()
        account = Account(
            id=str(uuid7()),
            name=payload.name,
            email=payload.email,
            username=payload.username,
            password_hash=hash_password(payload.password),
            contact=payload.contact,
            created_at=ts,
            updated_at=ts,
            is_verified=False,
            role=config_settings.DEFAULT_ROLE,
        )
        await repo.insert_account(self._storage, account)

        token, refresh_token = await self._issue_tokens(account.id, ts)
        logger.info("user.created", extra={"account_id": account.id, "username": account.username})
        return AuthResult(user=PublicAccount.from_account(account), token=token, refresh_token=refresh_token)

    async def login(self, credentials: SignIn) -> AuthResult:
        """Unknown username and wrong password fail identically."""
        account = await repo.account_by_username(self._storage, credentials.username)

        if account is None:
            dummy_verify()
            logger.warning("auth.user.invalid_credentials", extra={"username": credentials.username})
            raise InvalidCredentials()

        matches, new_hash = verify_password(credentials.password, account.password_hash)
        if not matches:
            logger.warning("auth.user.invalid_credentials", extra={"username": credentials.username})
            raise InvalidCredentials()

        ts = self._clock()
        if new_hash:
            await repo.update_password_hash(self._storage, account.id, new_hash, ts)
            logger.info("auth.password.rehashed", extra={"account_id": account.id})

        token, refresh_token = await self._issue_tokens(account.id, ts)
        logger.info("auth.tokens.issued", extra={"account_id": account.id})
        return AuthResult(user=PublicAccount.from_account(account), token=token, refresh_token=refresh_token)

    async def issue_verification_token(self, email: str) -> str:
        email = normalize_email_address(email)
        ts = self._clock()
        token = generate_plain_token(32)
        await repo.save_verification_token(self._storage, VerificationToken(
            id=str(uuid7()),
            token=token,
            type=EMAIL_VERIFICATION,
            email=email,
            created_at=ts,
            expires_at=ts + timedelta(seconds=VERIFICATION_TOKEN_TTL_SECONDS),
        ))
        logger.info("auth.verification.issued", extra={"email": email})
        return token

    async def verify_email(self, token: str) -> bool:
        ts = self._clock()
        row = await repo.consume_verification_token(self._storage, token, EMAIL_VERIFICATION, ts)
        if row is None:
            logger.warning("auth.verification.invalid_or_expired")
            raise InvalidOrExpiredToken("Invalid or expired verification token")

        changed = await repo.mark_email_verified(self._storage, row.email, ts)
        logger.info("auth.verification.completed", extra={"email": row.email, "accounts": changed})
        return True

    async def logout(self) -> int:
        """Expire every session as of now. Refresh tokens are left alone."""
        expired = await repo.expire_all_sessions(self._storage, self._clock())
        logger.info("auth.logout.sessions_expired", extra={"count": expired})
        return expired

    async def is_session_valid(self, token: str) -> bool:
        ts = self._clock()
        claims = decode_token(token)
        if not claims or claims.get("typ") != SESSION_TOKEN_TYPE or token_expired(claims, ts):
            return False

        session = await repo.session_by_token(self._storage, token)
        return session is not None and ts < session.expires_at

    async def is_refresh_token_valid(self, token: str) -> bool:
        ts = self._clock()
        claims = decode_token(token)
        if not claims or claims.get("typ") != REFRESH_TOKEN_TYPE or token_expired(claims, ts):
            return False

        row = await repo.refresh_token_by_value(self._storage, token)
        return row is not None and not row.is_revoked and ts < row.expires_at

    async def refresh_session(self, refresh_token: str) -> TokenPair:
        """Trade a live refresh token for a new session; the refresh token is rotated."""
        if not await self.is_refresh_token_valid(refresh_token):
            logger.warning("auth.refresh.validate_failed", extra={"reason": "invalid_or_expired_token"})
            raise InvalidOrExpiredToken("Invalid or expired refresh token")

        row = await repo.refresh_token_by_value(self._storage, refresh_token)
        if not await repo.revoke_refresh_token(self._storage, refresh_token):
            # rotated by a concurrent refresh in between
            logger.warning("auth.refresh.validate_failed", extra={"reason": "already_rotated"})
            raise InvalidOrExpiredToken("Invalid or expired refresh token")

        token, new_refresh = await self._issue_tokens(row.user_id, self._clock())
        logger.info("auth.refresh.rotated", extra={"account_id": row.user_id})
        return TokenPair(token=token, refresh_token=new_refresh)

    async def revoke_refresh_token(self, token: str) -> bool:
        revoked = await repo.revoke_refresh_token(self._storage, token)
        if revoked:
            logger.info("auth.refresh.revoked")
        return revoked

    async def purge_expired_sessions(self) -> int:
        purged = await repo.purge_expired_sessions(self._storage, self._clock())
        logger.info("auth.sessions.purged", extra={"count": purged})
        return purged

    async def get_account(self, account_id: str) -> PublicAccount:
        account = await repo.account_by_id(self._storage, account_id)
        if account is None:
            logger.warning("auth.user.not_found", extra={"account_id": account_id})
            raise NotFound("Account not found")
        return PublicAccount.from_account(account)
