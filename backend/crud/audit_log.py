from typing import List, Optional

from sqlalchemy.orm import Session

from models.audit_log import AuditLog
from schemas.audit_log import AuditLogCreate


def create_audit_log(db: Session, log_entry: AuditLogCreate) -> AuditLog:
    """Stage an audit row in the caller's transaction; it commits together with the change it describes."""
    db_log_entry = AuditLog(**log_entry.model_dump())
    db.add(db_log_entry)
    db.flush()
    return db_log_entry


def get_audit_trail(db: Session, tenant_id: str, table_name: str, record_id: Optional[int] = None) -> List[AuditLog]:
    query = db.query(AuditLog).filter(AuditLog.tenant_id == tenant_id, AuditLog.table_name == table_name)
    if record_id is not None:
        query = query.filter(AuditLog.record_id == record_id)
    return query.order_by(AuditLog.changed_at, AuditLog.id).all()
