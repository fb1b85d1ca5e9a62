from pydantic import BaseModel, Field, model_validator
from typing import Optional, List
from datetime import date, datetime
from decimal import Decimal
from schemas.common import non_nullable

class SaleItemCreate(BaseModel):
    product_id: int
    quantity: Decimal = Field(..., gt=0)

class SaleItem(BaseModel):
    id: int
    product_id: int
    name: Optional[str] = None
    quantity: Decimal
    rate: Decimal
    amount: Decimal

    class Config:
        from_attributes = True

class DirectEntry(BaseModel):
    description: str = Field(..., min_length=1)
    amount: Decimal = Field(..., gt=0)  # VAT inclusive

class SaleBase(BaseModel):
    billing_party_id: int
    invoice_number: str = Field(..., min_length=1)
    invoice_date: date
    discount_percentage: Decimal = Field(Decimal("0"), ge=0, le=100)
    note: Optional[str] = None
    is_vatable: bool = True

class SaleCreate(SaleBase):
    items: List[SaleItemCreate] = []
    direct_entry: Optional[DirectEntry] = None

    @model_validator(mode="after")
    def check_entry_mode(self):
        if self.items and self.direct_entry:
            raise ValueError("Cannot use both item-based entry and direct entry at the same time.")
        if not self.items and not self.direct_entry:
            raise ValueError("Either items or direct entry must be provided.")
        return self

class SaleUpdate(BaseModel):
    billing_party_id: Optional[int] = None
    invoice_number: Optional[str] = None
    invoice_date: Optional[date] = None
    discount_percentage: Optional[Decimal] = Field(None, ge=0, le=100)
    note: Optional[str] = None
    is_vatable: Optional[bool] = None
    items: Optional[List[SaleItemCreate]] = None
    direct_entry: Optional[DirectEntry] = None

    reject_null = non_nullable("billing_party_id", "invoice_number", "invoice_date", "is_vatable")

    @model_validator(mode="after")
    def check_entry_mode(self):
        if self.items and self.direct_entry:
            raise ValueError("Cannot use both item-based entry and direct entry at the same time.")
        return self

class Sale(SaleBase):
    id: int
    direct_entry_description: Optional[str] = None
    direct_entry_amount: Optional[Decimal] = None
    discount_amount: Decimal
    sub_total: Decimal
    taxable_amount: Decimal
    vat_amount: Decimal
    grand_total: Decimal
    items: List[SaleItem] = []
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
