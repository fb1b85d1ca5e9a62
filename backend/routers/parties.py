from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import List, Optional
import logging
from utils.auth_utils import get_current_user, get_user_identifier, require_group
from crud.audit_log import create_audit_log
from schemas.audit_log import AuditLogCreate
from utils import local_now, sqlalchemy_to_dict

from database import get_db
from models.parties import Party as PartyModel, PartyRole
from models.sales import Sale as SaleModel
from models.purchases import Purchase as PurchaseModel
from models.payments import Payment as PaymentModel
from models.returns import Return as ReturnModel
from models.expenses import Expense as ExpenseModel
from schemas.parties import Party, PartyCreate, PartyUpdate
from utils.tenancy import get_tenant_id

router = APIRouter(prefix="/parties", tags=["Parties"])
logger = logging.getLogger("parties")


def _get_party(db: Session, party_id: int, tenant_id: str) -> PartyModel:
    db_party = db.query(PartyModel).filter(PartyModel.id == party_id, PartyModel.tenant_id == tenant_id).first()
    if db_party is None:
        raise HTTPException(status_code=404, detail="Party not found")
    return db_party


def _check_pan_available(db: Session, pan_number: str, tenant_id: str):
    # Deleted parties keep their PAN under _tenant_pan_number_uc
    existing = db.query(PartyModel).execution_options(include_deleted=True).filter(
        PartyModel.pan_number == pan_number, PartyModel.tenant_id == tenant_id
    ).first()
    if existing is None:
        return
    if existing.deleted_at is not None:
        raise HTTPException(
            status_code=400,
            detail=f"PAN number belongs to deleted party '{existing.name}' and cannot be reused"
        )
    raise HTTPException(status_code=400, detail="Party with this PAN number already exists")


def _has_transactions(db: Session, party_id: int, tenant_id: str) -> bool:
    checks = [
        (SaleModel, SaleModel.billing_party_id),
        (PurchaseModel, PurchaseModel.supplied_by_id),
        (PaymentModel, PaymentModel.party_id),
        (ReturnModel, ReturnModel.returned_by_id),
        (ExpenseModel, ExpenseModel.party_id),
    ]
    for model, party_column in checks:
        if db.query(model.id).filter(party_column == party_id, model.tenant_id == tenant_id, model.deleted_at.is_(None)).first():
            return True
    return False


@router.post("/", response_model=Party, status_code=status.HTTP_201_CREATED)
def create_party(
    party: PartyCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_group(["staff", "admin", "superadmin"])),
    tenant_id: str = Depends(get_tenant_id)
):
    _check_pan_available(db, party.pan_number, tenant_id)

    db_party = PartyModel(**party.model_dump(), tenant_id=tenant_id, created_by=get_user_identifier(user))
    db.add(db_party)
    db.commit()
    db.refresh(db_party)
    logger.info(f"Party '{db_party.name}' created by user {get_user_identifier(user)} for tenant {tenant_id}")
    return db_party

@router.get("/", response_model=List[Party])
def read_parties(
    skip: int = 0,
    limit: int = 100,
    role: Optional[PartyRole] = None,
    search: Optional[str] = Query(None, description="Case-insensitive match on name"),
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    query = db.query(PartyModel).filter(PartyModel.tenant_id == tenant_id)
    if role:
        query = query.filter(PartyModel.role == role)
    if search:
        query = query.filter(PartyModel.name.ilike(f"%{search}%"))
    return query.order_by(PartyModel.name).offset(skip).limit(limit).all()

@router.get("/{party_id}", response_model=Party)
def read_party(
    party_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    return _get_party(db, party_id, tenant_id)

@router.patch("/{party_id}", response_model=Party)
def update_party(
    party_id: int,
    party: PartyUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_group(["staff", "admin", "superadmin"])),
    tenant_id: str = Depends(get_tenant_id)
):
    db_party = _get_party(db, party_id, tenant_id)
    old_values = sqlalchemy_to_dict(db_party)

    if party.pan_number is not None and party.pan_number != db_party.pan_number:
        _check_pan_available(db, party.pan_number, tenant_id)

    party_data = party.model_dump(exclude_unset=True)
    for key, value in party_data.items():
        setattr(db_party, key, value)
    db_party.updated_at = local_now()
    db_party.updated_by = get_user_identifier(user)

    new_values = sqlalchemy_to_dict(db_party)
    log_entry = AuditLogCreate(
        tenant_id=tenant_id,
        table_name='parties',
        record_id=party_id,
        changed_by=get_user_identifier(user),
        action='UPDATE',
        old_values=old_values,
        new_values=new_values
    )
    create_audit_log(db=db, log_entry=log_entry)
    db.commit()
    db.refresh(db_party)
    logger.info(f"Party '{db_party.name}' (ID: {party_id}) updated by user {get_user_identifier(user)} for tenant {tenant_id}")
    return db_party

@router.delete("/{party_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_party(
    party_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_group(["admin", "superadmin"])),
    tenant_id: str = Depends(get_tenant_id)
):
    db_party = _get_party(db, party_id, tenant_id)

    if _has_transactions(db, party_id, tenant_id):
        logger.warning(f"Refused to delete party '{db_party.name}' (ID: {party_id}) with transactions, requested by {get_user_identifier(user)} for tenant {tenant_id}")
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Party '{db_party.name}' has recorded transactions and cannot be deleted."
        )

    old_values = sqlalchemy_to_dict(db_party)
    db_party.deleted_at = local_now()
    db_party.deleted_by = get_user_identifier(user)
    new_values = sqlalchemy_to_dict(db_party)

    log_entry = AuditLogCreate(
        tenant_id=tenant_id,
        table_name='parties',
        record_id=party_id,
        changed_by=get_user_identifier(user),
        action='DELETE',
        old_values=old_values,
        new_values=new_values
    )
    create_audit_log(db=db, log_entry=log_entry)
    db.commit()
    logger.info(f"Party '{db_party.name}' (ID: {party_id}) deleted by user {get_user_identifier(user)} for tenant {tenant_id}")
