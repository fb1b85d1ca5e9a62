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
from models.purchases import Purchase as PurchaseModel
from schemas.purchases import Purchase, PurchaseCreate, PurchaseUpdate

router = APIRouter(prefix="/purchases", tags=["Purchases"])
logger = logging.getLogger("purchases")


def _check_party(db: Session, party_id: int, tenant_id: str):
    party = db.query(PartyModel).filter(PartyModel.id == party_id, PartyModel.tenant_id == tenant_id).first()
    if not party:
        raise HTTPException(status_code=404, detail="Supplier not found")


def _get_purchase(db: Session, purchase_id: int, tenant_id: str) -> PurchaseModel:
    db_purchase = db.query(PurchaseModel).filter(PurchaseModel.id == purchase_id, PurchaseModel.tenant_id == tenant_id).first()
    if not db_purchase:
        raise HTTPException(status_code=404, detail="Purchase not found")
    return db_purchase


@router.post("/", response_model=Purchase, status_code=status.HTTP_201_CREATED)
def create_purchase(
    purchase: PurchaseCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_group(["staff", "admin", "superadmin"])),
    tenant_id: str = Depends(get_tenant_id)
):
    _check_party(db, purchase.supplied_by_id, tenant_id)
    db_purchase = PurchaseModel(**purchase.model_dump(), tenant_id=tenant_id, created_by=get_user_identifier(user))
    db.add(db_purchase)
    db.commit()
    db.refresh(db_purchase)
    logger.info(f"Purchase {db_purchase.invoice_number} of {db_purchase.amount} created by user {get_user_identifier(user)} for tenant {tenant_id}")
    return db_purchase

@router.get("/", response_model=List[Purchase])
def read_purchases(
    skip: int = 0,
    limit: int = 100,
    party_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    query = db.query(PurchaseModel).filter(PurchaseModel.tenant_id == tenant_id)
    if party_id:
        query = query.filter(PurchaseModel.supplied_by_id == party_id)
    if start_date:
        query = query.filter(PurchaseModel.invoice_date >= start_date)
    if end_date:
        query = query.filter(PurchaseModel.invoice_date <= end_date)
    return query.order_by(PurchaseModel.invoice_date.desc(), PurchaseModel.id.desc()).offset(skip).limit(limit).all()

@router.get("/{purchase_id}", response_model=Purchase)
def read_purchase(
    purchase_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    return _get_purchase(db, purchase_id, tenant_id)

@router.patch("/{purchase_id}", response_model=Purchase)
def update_purchase(
    purchase_id: int,
    purchase: PurchaseUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_group(["staff", "admin", "superadmin"])),
    tenant_id: str = Depends(get_tenant_id)
):
    db_purchase = _get_purchase(db, purchase_id, tenant_id)
    if purchase.supplied_by_id is not None:
        _check_party(db, purchase.supplied_by_id, tenant_id)

    old_values = sqlalchemy_to_dict(db_purchase)
    for key, value in purchase.model_dump(exclude_unset=True).items():
        setattr(db_purchase, key, value)
    db_purchase.updated_at = local_now()
    db_purchase.updated_by = get_user_identifier(user)
    new_values = sqlalchemy_to_dict(db_purchase)

    log_entry = AuditLogCreate(
        tenant_id=tenant_id,
        table_name='purchases',
        record_id=purchase_id,
        changed_by=get_user_identifier(user),
        action='UPDATE',
        old_values=old_values,
        new_values=new_values
    )
    create_audit_log(db=db, log_entry=log_entry)
    db.commit()
    db.refresh(db_purchase)
    logger.info(f"Purchase {purchase_id} updated by user {get_user_identifier(user)} for tenant {tenant_id}")
    return db_purchase

@router.delete("/{purchase_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_purchase(
    purchase_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_group(["admin", "superadmin"])),
    tenant_id: str = Depends(get_tenant_id)
):
    db_purchase = _get_purchase(db, purchase_id, tenant_id)
    old_values = sqlalchemy_to_dict(db_purchase)
    db_purchase.deleted_at = local_now()
    db_purchase.deleted_by = get_user_identifier(user)
    new_values = sqlalchemy_to_dict(db_purchase)

    log_entry = AuditLogCreate(
        tenant_id=tenant_id,
        table_name='purchases',
        record_id=purchase_id,
        changed_by=get_user_identifier(user),
        action='DELETE',
        old_values=old_values,
        new_values=new_values
    )
    create_audit_log(db=db, log_entry=log_entry)
    db.commit()
    logger.info(f"Purchase {purchase_id} deleted by user {get_user_identifier(user)} for tenant {tenant_id}")
