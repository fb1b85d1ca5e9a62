from pydantic import BaseModel, Field
from typing import Optional
from datetime import date, datetime
from decimal import Decimal
from models.returns import ReturnType
from schemas.common import non_nullable

class ReturnBase(BaseModel):
    returned_by_id: int
    return_type: ReturnType = ReturnType.CREDIT_NOTE
    invoice_number: str = Field(..., min_length=1)
    return_date: date
    amount: Decimal = Field(..., gt=0)
    description: Optional[str] = None

class ReturnCreate(ReturnBase):
    pass

class ReturnUpdate(BaseModel):
    returned_by_id: Optional[int] = None
    return_type: Optional[ReturnType] = None
    invoice_number: Optional[str] = None
    return_date: Optional[date] = None
    amount: Optional[Decimal] = Field(None, gt=0)
    description: Optional[str] = None

    reject_null = non_nullable("returned_by_id", "return_type", "invoice_number", "return_date", "amount")

class Return(ReturnBase):
    id: int
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
