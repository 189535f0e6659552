from typing import Optional, Protocol
from bookbridge.common.custom_exceptions import Unauthenticated
from bookbridge.config.settings import config_settings


class IdentityContext(Protocol):
    """Who the commerce repositories act for."""

    def current_user_id(self) -> Optional[str]: ...


class StaticIdentity:
    """A fixed identity. The app wires the placeholder user; tests swap in their own."""

    def __init__(self, user_id: Optional[str] = None):
        self.user_id = user_id

    def current_user_id(self) -> Optional[str]:
        return self.user_id


def placeholder_identity() -> StaticIdentity:
    return StaticIdentity(config_settings.PLACEHOLDER_USER_ID)


def require_user_id(identity: IdentityContext) -> str:
    user_id = identity.current_user_id()
    if not user_id:
        raise Unauthenticated()
    return user_id
