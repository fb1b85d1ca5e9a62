from pydantic import BaseModel
from datetime import datetime
from typing import Any, Dict, Literal, Optional

AuditAction = Literal["CREATE", "UPDATE", "DELETE"]

class AuditLogCreate(BaseModel):
    tenant_id: str
    table_name: str
    record_id: int
    changed_by: str
    action: AuditAction
    old_values: Optional[Dict[str, Any]] = None
    new_values: Optional[Dict[str, Any]] = None

class AuditLogOut(AuditLogCreate):
    id: int
    changed_at: Optional[datetime] = None

    class Config:
        from_attributes = True
