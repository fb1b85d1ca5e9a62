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
from models.payments import Payment as PaymentModel, PaymentDirection
from schemas.payments import Payment, PaymentCreate, PaymentUpdate

router = APIRouter(prefix="/payments", tags=["Payments"])
logger = logging.getLogger("payments")


def _check_party(db: Session, party_id: int, tenant_id: str):
    party = db.query(PartyModel).filter(PartyModel.id == party_id, PartyModel.tenant_id == tenant_id).first()
    if not party:
        raise HTTPException(status_code=404, detail="Party not found")


def _get_payment(db: Session, payment_id: int, tenant_id: str) -> PaymentModel:
    db_payment = db.query(PaymentModel).filter(PaymentModel.id == payment_id, PaymentModel.tenant_id == tenant_id).first()
    if not db_payment:
        raise HTTPException(status_code=404, detail="Payment not found")
    return db_payment


@router.post("/", response_model=Payment, status_code=status.HTTP_201_CREATED)
def create_payment(
    payment: PaymentCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_group(["staff", "admin", "superadmin"])),
    tenant_id: str = Depends(get_tenant_id)
):
    _check_party(db, payment.party_id, tenant_id)
    if payment.deposited_date and payment.deposited_date < payment.payment_date:
        raise HTTPException(status_code=400, detail="Deposited date cannot be before the payment date.")

    db_payment = PaymentModel(**payment.model_dump(), tenant_id=tenant_id, created_by=get_user_identifier(user))
    db.add(db_payment)
    db.commit()
    db.refresh(db_payment)
    logger.info(
        f"Payment {db_payment.id} ({db_payment.direction.value}, {db_payment.payment_type.value}) of {db_payment.amount} "
        f"for party {db_payment.party_id} created by user {get_user_identifier(user)} for tenant {tenant_id}"
    )
    return db_payment

@router.get("/", response_model=List[Payment])
def read_payments(
    skip: int = 0,
    limit: int = 100,
    party_id: Optional[int] = None,
    direction: Optional[PaymentDirection] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    query = db.query(PaymentModel).filter(PaymentModel.tenant_id == tenant_id)
    if party_id:
        query = query.filter(PaymentModel.party_id == party_id)
    if direction:
        query = query.filter(PaymentModel.direction == direction)
    if start_date:
        query = query.filter(PaymentModel.payment_date >= start_date)
    if end_date:
        query = query.filter(PaymentModel.payment_date <= end_date)
    return query.order_by(PaymentModel.payment_date.desc(), PaymentModel.id.desc()).offset(skip).limit(limit).all()

@router.get("/{payment_id}", response_model=Payment)
def read_payment(
    payment_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    return _get_payment(db, payment_id, tenant_id)

@router.patch("/{payment_id}", response_model=Payment)
def update_payment(
    payment_id: int,
    payment: PaymentUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_group(["staff", "admin", "superadmin"])),
    tenant_id: str = Depends(get_tenant_id)
):
    db_payment = _get_payment(db, payment_id, tenant_id)
    if payment.party_id is not None:
        _check_party(db, payment.party_id, tenant_id)

    old_values = sqlalchemy_to_dict(db_payment)
    for key, value in payment.model_dump(exclude_unset=True).items():
        setattr(db_payment, key, value)
    if db_payment.deposited_date and db_payment.deposited_date < db_payment.payment_date:
        db.rollback()
        raise HTTPException(status_code=400, detail="Deposited date cannot be before the payment date.")
    db_payment.updated_at = local_now()
    db_payment.updated_by = get_user_identifier(user)
    new_values = sqlalchemy_to_dict(db_payment)

    log_entry = AuditLogCreate(
        tenant_id=tenant_id,
        table_name='payments',
        record_id=payment_id,
        changed_by=get_user_identifier(user),
        action='UPDATE',
        old_values=old_values,
        new_values=new_values
    )
    create_audit_log(db=db, log_entry=log_entry)
    db.commit()
    db.refresh(db_payment)
    logger.info(f"Payment {payment_id} updated by user {get_user_identifier(user)} for tenant {tenant_id}")
    return db_payment

@router.delete("/{payment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_payment(
    payment_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_group(["admin", "superadmin"])),
    tenant_id: str = Depends(get_tenant_id)
):
    db_payment = _get_payment(db, payment_id, tenant_id)
    old_values = sqlalchemy_to_dict(db_payment)
    db_payment.deleted_at = local_now()
    db_payment.deleted_by = get_user_identifier(user)
    new_values = sqlalchemy_to_dict(db_payment)

    log_entry = AuditLogCreate(
        tenant_id=tenant_id,
        table_name='payments',
        record_id=payment_id,
        changed_by=get_user_identifier(user),
        action='DELETE',
        old_values=old_values,
        new_values=new_values
    )
    create_audit_log(db=db, log_entry=log_entry)
    db.commit()
    logger.info(f"Payment {payment_id} deleted by user {get_user_identifier(user)} for tenant {tenant_id}")
