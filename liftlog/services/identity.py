from __future__ import annotations

import logging

from pydantic import EmailStr, TypeAdapter, ValidationError
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from liftlog.auth.provider import AuthProvider
from liftlog.core.errors import ProfileIncomplete, Unauthenticated, storage_errors
from liftlog.db.models.user import User

logger = logging.getLogger("liftlog.domain")

# Postgres reports the constraint name, SQLite reports table.column.
USER_UNIQUE_MARKERS = (
    "users_clerkId_unique",
    "users_email_unique",
    "users.clerkId",
    "users.email",
)

FALLBACK_DISPLAY_NAME = "User"

_email_adapter = TypeAdapter(EmailStr)


def derive_display_name(first_name: str | None, last_name: str | None, email: str | None) -> str:
    # Any non-empty first name counts as present, even if it is only whitespace.
    if first_name:
        parts = (first_name.strip(), (last_name or "").strip())
        full_name = " ".join(part for part in parts if part)
        if full_name:
            return full_name

    local_part = (email or "").split("@", 1)[0].strip()
    return local_part or FALLBACK_DISPLAY_NAME


def _is_user_unique_conflict(exc: IntegrityError) -> bool:
    diag = getattr(exc.orig, "diag", None)
    constraint_name = getattr(diag, "constraint_name", None)
    if constraint_name in USER_UNIQUE_MARKERS:
        return True
    message = str(exc.orig)
    return any(marker in message for marker in USER_UNIQUE_MARKERS)


class IdentityResolver:
    """Maps the external principal to an internal ``users.id``, provisioning on first sight."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], auth: AuthProvider):
        self._session_factory = session_factory
        self._auth = auth

    async def _find_user_id(self, db: AsyncSession, external_id: str) -> int | None:
        return (
            await db.execute(select(User.id).where(User.external_id == external_id))
        ).scalar_one_or_none()

    async def resolve_current_user_id(self) -> int:
        external_id = await self._auth.get_principal_id()
        if not external_id:
            raise Unauthenticated("Not authenticated")

        with storage_errors("user lookup"):
            async with self._session_factory() as db:
                user_id = await self._find_user_id(db, external_id)

        if user_id is not None:
            return user_id
        return await self._provision_user(external_id)

    async def _provision_user(self, external_id: str) -> int:
        profile = await self._auth.get_profile()
        if profile is None:
            raise Unauthenticated("Session ended before the profile could be read")

        email = profile.primary_email()
        if not email:
            raise ProfileIncomplete("An email address is required")
        try:
            email = _email_adapter.validate_python(email)
        except ValidationError:
            raise ProfileIncomplete("The email address on file is not valid") from None

        name = derive_display_name(profile.first_name, profile.last_name, email)

        with storage_errors("user provisioning"):
            async with self._session_factory() as db:
                user = User(external_id=external_id, name=name, email=email)
                db.add(user)
                try:
                    await db.flush()
                    user_id = user.id
                    await db.commit()
                except IntegrityError as exc:
                    await db.rollback()
                    if not _is_user_unique_conflict(exc):
                        raise

                    # Another request provisioned the same principal first.
                    existing_id = await self._find_user_id(db, external_id)
                    if existing_id is None:
                        raise
                    logger.info(
                        "domain_event event=user_provision_race user_id=%s",
                        existing_id,
                    )
                    return existing_id

        logger.info(
            "domain_event event=user_provisioned user_id=%s name=%s",
            user_id,
            name,
        )
        return user_id
