from datetime import datetime
from pydantic import BaseModel, Field
from typing import Optional
from schemas.common import non_nullable

class AppConfigCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100, pattern=r"^[A-Za-z0-9_.-]+$")
    value: str
    description: Optional[str] = Field(None, max_length=255)

class AppConfigUpdate(BaseModel):
    value: Optional[str] = None
    description: Optional[str] = Field(None, max_length=255)

    reject_null = non_nullable("value")

class AppConfigOut(AppConfigCreate):
    id: int
    tenant_id: str
    updated_by: Optional[str] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
