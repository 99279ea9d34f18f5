from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from liftlog.api.deps import get_current_user_id
from liftlog.core.errors import storage_errors
from liftlog.db.models.user import User
from liftlog.db.session import get_db
from liftlog.schemas.me import MeResponse

router = APIRouter(prefix="/v1/me", tags=["me"])


@router.get("", response_model=MeResponse)
async def me(
    db: AsyncSession = Depends(get_db),
    current_user_id: int = Depends(get_current_user_id),
):
    with storage_errors("user read"):
        user = (await db.execute(select(User).where(User.id == current_user_id))).scalar_one()
    return MeResponse(
        user_id=user.id,
        external_id=user.external_id,
        email=user.email,
        name=user.name,
    )
