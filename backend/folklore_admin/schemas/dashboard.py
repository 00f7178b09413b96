"""Dashboard schemas."""

from decimal import Decimal
from typing import Dict

from pydantic import BaseModel


class DashboardStats(BaseModel):
    reservations_total: int
    reservations_by_status: Dict[str, int]
    reservations_today: int
    persons_next_7_days: int
    revenue_paid: Decimal
    upcoming_events: int
    low_stock_items: int
    commissions_pending: Decimal
    attendance_unpaid: Decimal
