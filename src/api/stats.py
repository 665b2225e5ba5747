"""Dashboard statistics routes."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import CurrentUser, get_current_user, require_admin, require_agent
from src.db.session import get_db_session
from src.services.stats_service import StatsService

router = APIRouter(prefix="/api", tags=["stats"])


@router.get("/admin-stats", dependencies=[Depends(require_admin)])
async def admin_stats(
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, object]:
    return await StatsService(session).admin_stats()


@router.get("/agent-stats", dependencies=[Depends(require_agent)])
async def agent_stats(
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, object]:
    return await StatsService(session).agent_stats(current_user.email)


@router.get("/user-stats")
async def user_stats(
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, object]:
    return await StatsService(session).user_stats(current_user.email)
