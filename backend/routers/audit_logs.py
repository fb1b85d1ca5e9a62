from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from database import get_db
from crud.audit_log import get_audit_trail
from schemas.audit_log import AuditLogOut
from utils.auth_utils import get_user_identifier, require_group
from utils.tenancy import get_tenant_id

router = APIRouter(prefix="/audit-logs", tags=["Audit Logs"])
logger = logging.getLogger("audit_logs")


@router.get("/", response_model=List[AuditLogOut])
def read_audit_trail(
    table_name: str = Query(..., min_length=1, description="Table whose history to read, e.g. parties"),
    record_id: Optional[int] = None,
    db: Session = Depends(get_db),
    user: dict = Depends(require_group(["admin", "superadmin"])),
    tenant_id: str = Depends(get_tenant_id)
):
    """Change history of one table, or of one record in it, oldest first."""
    logger.info(f"Audit trail of {table_name} {record_id or ''} read by {get_user_identifier(user)} for tenant {tenant_id}")
    return get_audit_trail(db, tenant_id, table_name, record_id)
