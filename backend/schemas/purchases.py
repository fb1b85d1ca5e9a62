from pydantic import BaseModel, Field
from typing import Optional
from datetime import date, datetime
from decimal import Decimal
from schemas.common import non_nullable

class PurchaseBase(BaseModel):
    supplied_by_id: int
    invoice_number: str = Field(..., min_length=1)
    invoice_date: date
    amount: Decimal = Field(..., gt=0)
    is_vatable: bool = True
    description: str = Field(..., min_length=1)
    note: Optional[str] = None

class PurchaseCreate(PurchaseBase):
    pass

class PurchaseUpdate(BaseModel):
    supplied_by_id: Optional[int] = None
    invoice_number: Optional[str] = None
    invoice_date: Optional[date] = None
    amount: Optional[Decimal] = Field(None, gt=0)
    is_vatable: Optional[bool] = None
    description: Optional[str] = None
    note: Optional[str] = None

    reject_null = non_nullable("supplied_by_id", "invoice_number", "invoice_date", "amount", "is_vatable", "description")

class Purchase(PurchaseBase):
    id: int
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
