from zoneinfo import ZoneInfo

from fastapi import Depends, Header, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from liftlog.auth.provider import BearerTokenAuthProvider
from liftlog.core.dates import resolve_timezone
from liftlog.db.session import get_sessionmaker
from liftlog.services.identity import IdentityResolver
from liftlog.services.workouts import WorkoutQueryService

bearer_scheme = HTTPBearer(auto_error=False)


def get_auth_provider(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> BearerTokenAuthProvider:
    if credentials is None or credentials.scheme.lower() != "bearer":
        return BearerTokenAuthProvider(None)
    return BearerTokenAuthProvider(credentials.credentials)


def get_client_timezone(
    client_timezone: str | None = Header(default=None, alias="X-Client-Timezone"),
) -> ZoneInfo:
    return resolve_timezone(client_timezone)


def get_identity_resolver(
    auth: BearerTokenAuthProvider = Depends(get_auth_provider),
) -> IdentityResolver:
    return IdentityResolver(get_sessionmaker(), auth)


async def get_current_user_id(
    request: Request,
    resolver: IdentityResolver = Depends(get_identity_resolver),
) -> int:
    user_id = await resolver.resolve_current_user_id()
    request.state.user_id = user_id
    return user_id


def get_workout_service(
    resolver: IdentityResolver = Depends(get_identity_resolver),
    tz: ZoneInfo = Depends(get_client_timezone),
) -> WorkoutQueryService:
    return WorkoutQueryService(get_sessionmaker(), resolver, tz=tz)
