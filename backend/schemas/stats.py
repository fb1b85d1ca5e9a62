from pydantic import BaseModel
from datetime import date
from decimal import Decimal

class StatCard(BaseModel):
    total: Decimal
    count: int

class DashboardCards(BaseModel):
    date_from: date
    date_to: date
    sales: StatCard
    purchases: StatCard
    expenses: StatCard
    payments_received: StatCard
    payments_paid: StatCard
    returns: StatCard
    party_count: int
