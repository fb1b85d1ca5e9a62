from datetime import date, timedelta
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import Optional
import logging

from crud import stats as crud_stats
from database import get_db
from schemas.stats import DashboardCards
from utils import local_now
from utils.auth_utils import get_current_user
from utils.tenancy import get_tenant_id

router = APIRouter(prefix="/stats", tags=["Stats"])
logger = logging.getLogger("stats")


@router.get("/dashboard-cards", response_model=DashboardCards)
def get_dashboard_cards(
    date_from: Optional[date] = Query(None, alias="from"),
    date_to: Optional[date] = Query(None, alias="to"),
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    """Totals and counts per transaction kind. Defaults to the month ending today."""
    end_date = date_to or local_now().date()
    start_date = date_from or end_date - timedelta(days=30)
    if start_date > end_date:
        raise HTTPException(status_code=400, detail="Start date cannot be later than end date.")
    return crud_stats.get_dashboard_cards(db, start_date, end_date, tenant_id)
