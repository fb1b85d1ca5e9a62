from pydantic import BaseModel, Field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from schemas.common import non_nullable

class ExpenseCategoryBase(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None

class ExpenseCategoryCreate(ExpenseCategoryBase):
    pass

class ExpenseCategoryUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None

    reject_null = non_nullable("name")

class ExpenseCategory(ExpenseCategoryBase):
    id: int

    class Config:
        from_attributes = True

class ExpenseBase(BaseModel):
    category_id: int
    party_id: Optional[int] = None
    invoice_number: Optional[str] = None
    invoice_date: date
    amount: Decimal = Field(..., gt=0)
    description: str = Field(..., min_length=1)
    is_vatable: bool = False

class ExpenseCreate(ExpenseBase):
    pass

class ExpenseUpdate(BaseModel):
    category_id: Optional[int] = None
    party_id: Optional[int] = None
    invoice_number: Optional[str] = None
    invoice_date: Optional[date] = None
    amount: Optional[Decimal] = Field(None, gt=0)
    description: Optional[str] = None
    is_vatable: Optional[bool] = None

    reject_null = non_nullable("category_id", "invoice_date", "amount", "description", "is_vatable")

class Expense(ExpenseBase):
    id: int
    tenant_id: str
    created_by: Optional[str] = None
    updated_by: Optional[str] = None

    class Config:
        from_attributes = True
