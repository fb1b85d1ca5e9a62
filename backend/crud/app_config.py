import logging
import os
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from crud.audit_log import create_audit_log
from models.app_config import AppConfig, BUSINESS_ADDRESS, BUSINESS_NAME, CURRENCY_LABEL, STATEMENT_KEYS
from schemas.app_config import AppConfigCreate, AppConfigUpdate
from schemas.audit_log import AuditLogCreate
from utils import local_now, sqlalchemy_to_dict

logger = logging.getLogger(__name__)

# Environment fallbacks for tenants that have not configured a letterhead yet
STATEMENT_DEFAULTS = {
    BUSINESS_NAME: os.getenv("BUSINESS_NAME", "Green Ledger"),
    BUSINESS_ADDRESS: os.getenv("BUSINESS_ADDRESS", "Kathmandu, Nepal"),
    CURRENCY_LABEL: os.getenv("CURRENCY_LABEL", "Rs."),
}


def get_config(db: Session, tenant_id: str, name: str) -> Optional[AppConfig]:
    return db.query(AppConfig).filter(AppConfig.tenant_id == tenant_id, AppConfig.name == name).first()


def list_configs(db: Session, tenant_id: str) -> List[AppConfig]:
    return db.query(AppConfig).filter(AppConfig.tenant_id == tenant_id).order_by(AppConfig.name).all()


def create_config(db: Session, config: AppConfigCreate, tenant_id: str, user_id: str) -> AppConfig:
    db_config = AppConfig(**config.model_dump(), tenant_id=tenant_id, created_by=user_id)
    db.add(db_config)
    db.flush()
    create_audit_log(db, AuditLogCreate(
        tenant_id=tenant_id,
        table_name='app_config',
        record_id=db_config.id,
        changed_by=user_id,
        action='CREATE',
        new_values=sqlalchemy_to_dict(db_config),
    ))
    db.commit()
    db.refresh(db_config)
    return db_config


def update_config_by_name(db: Session, name: str, config: AppConfigUpdate, tenant_id: str, user_id: str) -> Optional[AppConfig]:
    db_config = get_config(db, tenant_id, name)
    if not db_config:
        return None

    old_values = sqlalchemy_to_dict(db_config)
    for field, value in config.model_dump(exclude_unset=True).items():
        setattr(db_config, field, value)
    db_config.updated_at = local_now()
    db_config.updated_by = user_id
    create_audit_log(db, AuditLogCreate(
        tenant_id=tenant_id,
        table_name='app_config',
        record_id=db_config.id,
        changed_by=user_id,
        action='UPDATE',
        old_values=old_values,
        new_values=sqlalchemy_to_dict(db_config),
    ))
    db.commit()
    db.refresh(db_config)
    return db_config


def get_statement_config(db: Session, tenant_id: str) -> Dict[str, str]:
    """Letterhead for printed/exported statements; tenant rows override the environment defaults."""
    rows = db.query(AppConfig).filter(AppConfig.tenant_id == tenant_id, AppConfig.name.in_(STATEMENT_KEYS)).all()
    configured = {row.name: row.value for row in rows}
    return {key: configured.get(key, default) for key, default in STATEMENT_DEFAULTS.items()}
