# backend/services/stats.py
from datetime import date, datetime, timedelta, timezone
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from models.order import Order
from models.product import Product
from models.users import User

# Length of the analytics window, today included
ANALYTICS_DAYS = 30


def summary(db: Session, low_stock_threshold: int) -> dict:
    return {
        "total_products": db.query(Product).count(),
        "total_users": db.query(User).count(),
        "total_orders": db.query(Order).count(),
        "low_stock_products": db.query(Product).filter(
            Product.is_active.is_(True), Product.stock_quantity < low_stock_threshold
        ).count(),
    }


def daily_series(db: Session, days: int = ANALYTICS_DAYS, today: Optional[date] = None) -> List[dict]:
    """Order count and revenue per day for the last ``days`` days, zero-filled."""
    today = today or datetime.now(timezone.utc).date()
    since = today - timedelta(days=days - 1)

    rows = (
        db.query(
            func.date(Order.created_at).label("date"),
            func.count(Order.id).label("orders"),
            func.sum(Order.total_amount).label("revenue"),
        )
        .filter(Order.created_at >= datetime.combine(since, datetime.min.time()))
        .group_by(func.date(Order.created_at))
        .all()
    )
    by_date = {str(row.date): row for row in rows}

    series = []
    for i in range(days):
        key = (since + timedelta(days=i)).isoformat()
        row = by_date.get(key)
        series.append({
            "date": key,
            "count": row.orders if row else 0,
            "revenue": round(float(row.revenue or 0), 2) if row else 0.0,
        })
    return series
