# backend/routes/stats.py

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from pydantic import BaseModel
from typing import List

from config import settings
from database import get_db
from utils.tokenJWT import role_required
from models.users import User
from services import stats

router = APIRouter(
    prefix="/admin/stats",
    tags=["Stats"]
)

# === Pydantic Response Schemas ===

class StatsSummary(BaseModel):
    total_products: int
    total_users: int
    total_orders: int
    low_stock_products: int

class DailyPoint(BaseModel):
    date: str
    count: int
    revenue: float

class DailySeriesResponse(BaseModel):
    data: List[DailyPoint]


# === Endpoint 1: Dashboard Summary ===

@router.get("/summary", response_model=StatsSummary)
def get_stats_summary(
    db: Session = Depends(get_db),
    current_user: User = Depends(role_required("admin"))
):
    return StatsSummary(**stats.summary(db, settings.LOW_STOCK_THRESHOLD))

# === Endpoint 2: Orders and revenue per day, last 30 days ===

@router.get("/daily", response_model=DailySeriesResponse)
def get_daily_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(role_required("admin"))
):
    return DailySeriesResponse(data=stats.daily_series(db))
