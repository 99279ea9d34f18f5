"""Boundary to the external identity provider.

The service layer only needs two questions answered: who is calling, and what
does their profile look like. Both may come back empty at any moment because
the provider's session can end between calls.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from jose import JWTError

from liftlog.core.security import decode_identity_token


@dataclass(frozen=True)
class EmailAddress:
    email_address: str


@dataclass(frozen=True)
class ExternalProfile:
    email_addresses: list[EmailAddress] = field(default_factory=list)
    first_name: str | None = None
    last_name: str | None = None

    def primary_email(self) -> str | None:
        for entry in self.email_addresses:
            if entry.email_address and entry.email_address.strip():
                return entry.email_address.strip()
        return None


class AuthProvider(Protocol):
    async def get_principal_id(self) -> str | None:
        ...

    async def get_profile(self) -> ExternalProfile | None:
        ...


class BearerTokenAuthProvider:
    """Reads the principal from a provider-issued bearer JWT."""

    def __init__(self, token: str | None):
        self._token = token

    def _claims(self) -> dict | None:
        if not self._token:
            return None
        try:
            return decode_identity_token(self._token)
        except JWTError:
            return None

    async def get_principal_id(self) -> str | None:
        claims = self._claims()
        if claims is None:
            return None
        return str(claims["sub"])

    async def get_profile(self) -> ExternalProfile | None:
        claims = self._claims()
        if claims is None:
            return None
        email = claims.get("email")
        return ExternalProfile(
            email_addresses=[EmailAddress(email_address=email)] if email else [],
            first_name=claims.get("given_name"),
            last_name=claims.get("family_name"),
        )
