from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from database import get_db
from schemas.app_config import AppConfigCreate, AppConfigUpdate, AppConfigOut
from crud import app_config as crud_app_config
from utils.auth_utils import get_current_user, get_user_identifier, require_group
from utils.tenancy import get_tenant_id

router = APIRouter(tags=["Configurations"])
logger = logging.getLogger("app_config")

@router.post("/configurations/", response_model=AppConfigOut)
def create_config(
    config: AppConfigCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_group(["admin", "superadmin"])),
    tenant_id: str = Depends(get_tenant_id)
):
    if crud_app_config.get_config(db, tenant_id, config.name):
        raise HTTPException(status_code=400, detail=f"Configuration '{config.name}' already exists")
    db_config = crud_app_config.create_config(db, config, tenant_id, user_id=get_user_identifier(user))
    logger.info(f"Configuration '{config.name}' created by user {get_user_identifier(user)} for tenant {tenant_id}")
    return db_config


@router.get("/configurations/", response_model=List[AppConfigOut])
def get_configs(
    name: Optional[str] = None,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    if name:
        config = crud_app_config.get_config(db, tenant_id, name)
        return [config] if config else []
    return crud_app_config.list_configs(db, tenant_id)

@router.patch("/configurations/{name}/", response_model=AppConfigOut)
def update_config(
    name: str,
    config: AppConfigUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_group(["admin", "superadmin"])),
    tenant_id: str = Depends(get_tenant_id)
):
    updated = crud_app_config.update_config_by_name(db, name, config, tenant_id, user_id=get_user_identifier(user))
    if not updated:
        raise HTTPException(status_code=404, detail="Configuration not found")
    logger.info(f"Configuration '{name}' updated by user {get_user_identifier(user)} for tenant {tenant_id}")
    return updated
