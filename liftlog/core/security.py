from datetime import datetime, timedelta, timezone
import os

from jose import JWTError, jwt

ALGORITHM = "HS256"
IDENTITY_TOKEN_EXPIRE_MINUTES = 60


def _get_jwt_secret() -> str:
    secret = os.getenv("IDENTITY_JWT_SECRET")
    if not secret:
        raise RuntimeError("IDENTITY_JWT_SECRET is not set")
    return secret


def create_identity_token(
    external_id: str,
    email: str | None = None,
    given_name: str | None = None,
    family_name: str | None = None,
    expires_minutes: int = IDENTITY_TOKEN_EXPIRE_MINUTES,
) -> str:
    """Issue a session token the way the identity provider does.

    Used by local tooling and tests; production tokens come from the provider.
    """
    expire = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes)
    payload: dict = {
        "sub": external_id,
        "exp": expire,
    }
    if email is not None:
        payload["email"] = email
    if given_name is not None:
        payload["given_name"] = given_name
    if family_name is not None:
        payload["family_name"] = family_name
    return jwt.encode(payload, _get_jwt_secret(), algorithm=ALGORITHM)


def decode_identity_token(token: str) -> dict:
    claims = jwt.decode(token, _get_jwt_secret(), algorithms=[ALGORITHM])
    if not claims.get("sub"):
        raise JWTError("Missing subject")
    return claims
