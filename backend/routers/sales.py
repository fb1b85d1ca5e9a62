from datetime import date
from decimal import Decimal
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session, selectinload
from typing import List, Optional
import logging
from utils.auth_utils import get_current_user, get_user_identifier, require_group
from utils.tenancy import get_tenant_id
from crud.audit_log import create_audit_log
from crud import sales as crud_sales
from schemas.audit_log import AuditLogCreate
from utils import local_now, sqlalchemy_to_dict

from database import get_db
from models.parties import Party as PartyModel
from models.products import Product as ProductModel
from models.sales import Sale as SaleModel
from schemas.sales import Sale, SaleCreate, SaleItemCreate, SaleUpdate

router = APIRouter(prefix="/sales", tags=["Sales"])
logger = logging.getLogger("sales")


def _check_party(db: Session, party_id: int, tenant_id: str):
    party = db.query(PartyModel).filter(PartyModel.id == party_id, PartyModel.tenant_id == tenant_id).first()
    if not party:
        raise HTTPException(status_code=404, detail="Billing party not found")


def _build_items(db: Session, items: List[SaleItemCreate], tenant_id: str):
    db_items = []
    for item in items:
        product = db.query(ProductModel).filter(ProductModel.id == item.product_id, ProductModel.tenant_id == tenant_id).first()
        if not product:
            raise HTTPException(status_code=404, detail=f"Product with ID {item.product_id} not found")
        if not product.is_active:
            raise HTTPException(status_code=400, detail=f"Product '{product.name}' is inactive")
        db_items.append(crud_sales.build_item(product, item.quantity, tenant_id))
    return db_items


def _get_sale(db: Session, sale_id: int, tenant_id: str) -> SaleModel:
    db_sale = crud_sales.get_sale(db, sale_id, tenant_id)
    if not db_sale:
        raise HTTPException(status_code=404, detail="Sale not found")
    return db_sale


@router.post("/", response_model=Sale, status_code=status.HTTP_201_CREATED)
def create_sale(
    sale: SaleCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_group(["staff", "admin", "superadmin"])),
    tenant_id: str = Depends(get_tenant_id)
):
    _check_party(db, sale.billing_party_id, tenant_id)
    db_items = _build_items(db, sale.items, tenant_id)

    sale_data = sale.model_dump(exclude={"items", "direct_entry"})
    db_sale = SaleModel(**sale_data, tenant_id=tenant_id, created_by=get_user_identifier(user))
    if sale.direct_entry:
        db_sale.direct_entry_description = sale.direct_entry.description
        db_sale.direct_entry_amount = sale.direct_entry.amount
    db_sale.items = db_items
    crud_sales.apply_totals(db_sale, db_items)

    db.add(db_sale)
    db.commit()
    db.refresh(db_sale)
    logger.info(
        f"Sale {db_sale.invoice_number} for party {db_sale.billing_party_id} with grand total {db_sale.grand_total} "
        f"created by user {get_user_identifier(user)} for tenant {tenant_id}"
    )
    return db_sale

@router.get("/", response_model=List[Sale])
def read_sales(
    skip: int = 0,
    limit: int = 100,
    party_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    query = db.query(SaleModel).filter(SaleModel.tenant_id == tenant_id).options(selectinload(SaleModel.items))
    if party_id:
        query = query.filter(SaleModel.billing_party_id == party_id)
    if start_date:
        query = query.filter(SaleModel.invoice_date >= start_date)
    if end_date:
        query = query.filter(SaleModel.invoice_date <= end_date)
    return query.order_by(SaleModel.invoice_date.desc(), SaleModel.id.desc()).offset(skip).limit(limit).all()

@router.get("/{sale_id}", response_model=Sale)
def read_sale(
    sale_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    return _get_sale(db, sale_id, tenant_id)

@router.patch("/{sale_id}", response_model=Sale)
def update_sale(
    sale_id: int,
    sale: SaleUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_group(["staff", "admin", "superadmin"])),
    tenant_id: str = Depends(get_tenant_id)
):
    db_sale = _get_sale(db, sale_id, tenant_id)
    if sale.billing_party_id is not None:
        _check_party(db, sale.billing_party_id, tenant_id)

    old_values = sqlalchemy_to_dict(db_sale)
    for key, value in sale.model_dump(exclude_unset=True, exclude={"items", "direct_entry"}).items():
        setattr(db_sale, key, value)

    # Switching entry mode drops the other mode's data
    if sale.items:
        db_sale.items = _build_items(db, sale.items, tenant_id)
        db_sale.direct_entry_description = None
        db_sale.direct_entry_amount = None
    elif sale.direct_entry:
        db_sale.items = []
        db_sale.direct_entry_description = sale.direct_entry.description
        db_sale.direct_entry_amount = sale.direct_entry.amount

    if db_sale.discount_percentage is None:
        db_sale.discount_percentage = Decimal("0")
    crud_sales.apply_totals(db_sale, db_sale.items)
    db_sale.updated_at = local_now()
    db_sale.updated_by = get_user_identifier(user)
    new_values = sqlalchemy_to_dict(db_sale)

    log_entry = AuditLogCreate(
        tenant_id=tenant_id,
        table_name='sales',
        record_id=sale_id,
        changed_by=get_user_identifier(user),
        action='UPDATE',
        old_values=old_values,
        new_values=new_values
    )
    create_audit_log(db=db, log_entry=log_entry)
    db.commit()
    db.refresh(db_sale)
    logger.info(f"Sale {sale_id} updated by user {get_user_identifier(user)} for tenant {tenant_id}, grand total {db_sale.grand_total}")
    return db_sale

@router.delete("/{sale_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_sale(
    sale_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_group(["admin", "superadmin"])),
    tenant_id: str = Depends(get_tenant_id)
):
    db_sale = _get_sale(db, sale_id, tenant_id)
    old_values = sqlalchemy_to_dict(db_sale)
    db_sale.deleted_at = local_now()
    db_sale.deleted_by = get_user_identifier(user)
    new_values = sqlalchemy_to_dict(db_sale)

    log_entry = AuditLogCreate(
        tenant_id=tenant_id,
        table_name='sales',
        record_id=sale_id,
        changed_by=get_user_identifier(user),
        action='DELETE',
        old_values=old_values,
        new_values=new_values
    )
    create_audit_log(db=db, log_entry=log_entry)
    db.commit()
    logger.info(f"Sale {sale_id} deleted by user {get_user_identifier(user)} for tenant {tenant_id}")
