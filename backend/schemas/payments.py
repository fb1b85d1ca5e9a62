from pydantic import BaseModel, Field
from typing import Optional
from datetime import date, datetime
from decimal import Decimal
from models.payments import PaymentType, PaymentDirection
from schemas.common import non_nullable

class PaymentBase(BaseModel):
    party_id: int
    payment_type: PaymentType
    direction: PaymentDirection = PaymentDirection.RECEIVED
    amount: Decimal = Field(..., gt=0)
    payment_date: date
    deposited_date: Optional[date] = None
    reference_number: Optional[str] = None
    description: Optional[str] = None

class PaymentCreate(PaymentBase):
    pass

class PaymentUpdate(BaseModel):
    party_id: Optional[int] = None
    payment_type: Optional[PaymentType] = None
    direction: Optional[PaymentDirection] = None
    amount: Optional[Decimal] = Field(None, gt=0)
    payment_date: Optional[date] = None
    deposited_date: Optional[date] = None
    reference_number: Optional[str] = None
    description: Optional[str] = None

    reject_null = non_nullable("party_id", "payment_type", "direction", "amount", "payment_date")

class Payment(PaymentBase):
    id: int
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
