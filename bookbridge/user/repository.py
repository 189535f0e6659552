from datetime import datetime
from typing import Callable, List, Optional
from uuid6 import uuid7
from bookbridge.common.utils import now
from bookbridge.schema.address import Address
from bookbridge.schema.user import UserProfile
from bookbridge.storage.collection import Storage
from bookbridge.storage.constants import ADDRESSES_KEY, PROFILES_KEY
from bookbridge.user.constants import logger
from bookbridge.user.dependencies import IdentityContext, require_user_id
from bookbridge.user.models import AddressIn, ProfileIn


class AddressRepository:

    def __init__(self, storage: Storage, identity: IdentityContext, clock: Callable[[], datetime] = now):
        self._addresses = storage.collection(ADDRESSES_KEY, Address)
        self._identity = identity
        self._clock = clock

    async def save(self, data: AddressIn) -> Address:
        user_id = require_user_id(self._identity)
        address = Address(id=str(uuid7()), user_id=user_id, created_at=self._clock(), **data.model_dump())

        await self._addresses.mutate(lambda items: (items + [address], None))
        logger.info("address.saved", extra={"address_id": address.id, "user_id": user_id})
        return address

    async def list(self) -> List[Address]:
        """Addresses of the current user, newest first."""
        user_id = require_user_id(self._identity)
        owned = [a for a in await self._addresses.load() if a.user_id == user_id]
        # appended in creation order
        return owned[::-1]


class ProfileRepository:
    """One profile per identity; update() creates it on first use."""

    def __init__(self, storage: Storage, identity: IdentityContext):
        self._profiles = storage.collection(PROFILES_KEY, UserProfile)
        self._identity = identity

    async def get(self) -> Optional[UserProfile]:
        user_id = require_user_id(self._identity)
        for profile in await self._profiles.load():
            if profile.id == user_id:
                return profile
        return None

    async def update(self, data: ProfileIn) -> UserProfile:
        user_id = require_user_id(self._identity)
        profile = UserProfile(id=user_id, **data.model_dump())

        def upsert(items: List[UserProfile]):
            replaced = False
            out = []
            for it in items:
                if it.id == user_id:
                    out.append(profile)
                    replaced = True
                else:
                    out.append(it)
            if not replaced:
                out.append(profile)
            return out, replaced

        replaced = await self._profiles.mutate(upsert)
        logger.info("profile.updated" if replaced else "profile.created", extra={"user_id": user_id})
        return profile
