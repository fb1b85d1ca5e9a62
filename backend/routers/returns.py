from datetime import date
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional
import logging
from utils.auth_utils import get_current_user, get_user_identifier, require_group
from utils.tenancy import get_tenant_id
from crud.audit_log import create_audit_log
from schemas.audit_log import AuditLogCreate
from utils import local_now, sqlalchemy_to_dict

from database import get_db
from models.parties import Party as PartyModel
from models.returns import Return as ReturnModel, ReturnType
from schemas.returns import Return, ReturnCreate, ReturnUpdate

router = APIRouter(prefix="/returns", tags=["Returns"])
logger = logging.getLogger("returns")


def _check_party(db: Session, party_id: int, tenant_id: str):
    party = db.query(PartyModel).filter(PartyModel.id == party_id, PartyModel.tenant_id == tenant_id).first()
    if not party:
        raise HTTPException(status_code=404, detail="Party not found")


def _get_return(db: Session, return_id: int, tenant_id: str) -> ReturnModel:
    db_return = db.query(ReturnModel).filter(ReturnModel.id == return_id, ReturnModel.tenant_id == tenant_id).first()
    if not db_return:
        raise HTTPException(status_code=404, detail="Return not found")
    return db_return


@router.post("/", response_model=Return, status_code=status.HTTP_201_CREATED)
def create_return(
    return_in: ReturnCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_group(["staff", "admin", "superadmin"])),
    tenant_id: str = Depends(get_tenant_id)
):
    _check_party(db, return_in.returned_by_id, tenant_id)
    db_return = ReturnModel(**return_in.model_dump(), tenant_id=tenant_id, created_by=get_user_identifier(user))
    db.add(db_return)
    db.commit()
    db.refresh(db_return)
    logger.info(
        f"{db_return.return_type.value} {db_return.invoice_number} of {db_return.amount} for party "
        f"{db_return.returned_by_id} created by user {get_user_identifier(user)} for tenant {tenant_id}"
    )
    return db_return

@router.get("/", response_model=List[Return])
def read_returns(
    skip: int = 0,
    limit: int = 100,
    party_id: Optional[int] = None,
    return_type: Optional[ReturnType] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    query = db.query(ReturnModel).filter(ReturnModel.tenant_id == tenant_id)
    if party_id:
        query = query.filter(ReturnModel.returned_by_id == party_id)
    if return_type:
        query = query.filter(ReturnModel.return_type == return_type)
    if start_date:
        query = query.filter(ReturnModel.return_date >= start_date)
    if end_date:
        query = query.filter(ReturnModel.return_date <= end_date)
    return query.order_by(ReturnModel.return_date.desc(), ReturnModel.id.desc()).offset(skip).limit(limit).all()

@router.get("/{return_id}", response_model=Return)
def read_return(
    return_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    return _get_return(db, return_id, tenant_id)

@router.patch("/{return_id}", response_model=Return)
def update_return(
    return_id: int,
    return_in: ReturnUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_group(["staff", "admin", "superadmin"])),
    tenant_id: str = Depends(get_tenant_id)
):
    db_return = _get_return(db, return_id, tenant_id)
    if return_in.returned_by_id is not None:
        _check_party(db, return_in.returned_by_id, tenant_id)

    old_values = sqlalchemy_to_dict(db_return)
    for key, value in return_in.model_dump(exclude_unset=True).items():
        setattr(db_return, key, value)
    db_return.updated_at = local_now()
    db_return.updated_by = get_user_identifier(user)
    new_values = sqlalchemy_to_dict(db_return)

    log_entry = AuditLogCreate(
        tenant_id=tenant_id,
        table_name='returns',
        record_id=return_id,
        changed_by=get_user_identifier(user),
        action='UPDATE',
        old_values=old_values,
        new_values=new_values
    )
    create_audit_log(db=db, log_entry=log_entry)
    db.commit()
    db.refresh(db_return)
    logger.info(f"Return {return_id} updated by user {get_user_identifier(user)} for tenant {tenant_id}")
    return db_return

@router.delete("/{return_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_return(
    return_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_group(["admin", "superadmin"])),
    tenant_id: str = Depends(get_tenant_id)
):
    db_return = _get_return(db, return_id, tenant_id)
    old_values = sqlalchemy_to_dict(db_return)
    db_return.deleted_at = local_now()
    db_return.deleted_by = get_user_identifier(user)
    new_values = sqlalchemy_to_dict(db_return)

    log_entry = AuditLogCreate(
        tenant_id=tenant_id,
        table_name='returns',
        record_id=return_id,
        changed_by=get_user_identifier(user),
        action='DELETE',
        old_values=old_values,
        new_values=new_values
    )
    create_audit_log(db=db, log_entry=log_entry)
    db.commit()
    logger.info(f"Return {return_id} deleted by user {get_user_identifier(user)} for tenant {tenant_id}")
