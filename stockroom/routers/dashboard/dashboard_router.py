from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from stockroom.core.db import get_db
from stockroom.schemas.dashboard.dashboard_schemas import DashboardSummary
from stockroom.services.dashboard.dashboard_service import (
    get_dashboard_summary,
    RECENT_TRANSACTIONS_LIMIT,
)
from stockroom.utils.get_user import get_current_user
from stockroom.utils.response import APIResponse, success_response

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/summary", response_model=APIResponse[DashboardSummary])
async def dashboard_summary_api(
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
    recent: int = Query(RECENT_TRANSACTIONS_LIMIT, ge=1, le=100),
):
    summary = await get_dashboard_summary(db, recent_limit=recent)
    return success_response("Dashboard summary fetched successfully", summary)
