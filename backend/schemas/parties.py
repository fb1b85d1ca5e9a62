from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime
from decimal import Decimal
from models.parties import PartyRole
from schemas.common import non_nullable

class PartyBase(BaseModel):
    name: str = Field(..., min_length=1)
    phone: str
    alt_phone: Optional[str] = None
    contact_person: Optional[str] = None
    email: Optional[EmailStr] = None
    address: str
    pan_number: str = Field(..., min_length=1)
    is_vatable: bool = True
    party_margin: Decimal = Decimal("0")
    opening_balance: Decimal = Decimal("0")
    website: Optional[str] = None
    role: PartyRole

class PartyCreate(PartyBase):
    pass

class PartyUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    alt_phone: Optional[str] = None
    contact_person: Optional[str] = None
    email: Optional[EmailStr] = None
    address: Optional[str] = None
    pan_number: Optional[str] = None
    is_vatable: Optional[bool] = None
    party_margin: Optional[Decimal] = None
    opening_balance: Optional[Decimal] = None
    website: Optional[str] = None
    role: Optional[PartyRole] = None

    reject_null = non_nullable("name", "phone", "address", "pan_number", "is_vatable", "party_margin", "opening_balance", "role")

class Party(PartyBase):
    id: int
    tenant_id: Optional[str] = None
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
