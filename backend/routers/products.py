from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
import logging
from utils.auth_utils import get_current_user, get_user_identifier, require_group
from utils.tenancy import get_tenant_id
from crud.audit_log import create_audit_log
from schemas.audit_log import AuditLogCreate
from utils import local_now, sqlalchemy_to_dict

from database import get_db
from models.products import Product as ProductModel
from schemas.products import Product, ProductCreate, ProductUpdate

router = APIRouter(prefix="/products", tags=["Products"])
logger = logging.getLogger("products")


def _get_product(db: Session, product_id: int, tenant_id: str) -> ProductModel:
    db_product = db.query(ProductModel).filter(ProductModel.id == product_id, ProductModel.tenant_id == tenant_id).first()
    if not db_product:
        raise HTTPException(status_code=404, detail="Product not found")
    return db_product


def _check_name_available(db: Session, name: str, tenant_id: str):
    # Deleted products keep their name under _tenant_product_name_uc
    existing = db.query(ProductModel).execution_options(include_deleted=True).filter(
        ProductModel.name == name, ProductModel.tenant_id == tenant_id
    ).first()
    if existing is None:
        return
    detail = "Product with this name already exists"
    if existing.deleted_at is not None:
        detail = f"{detail} (deleted); choose another name"
    raise HTTPException(status_code=400, detail=detail)


@router.post("/", response_model=Product, status_code=status.HTTP_201_CREATED)
def create_product(
    product: ProductCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_group(["staff", "admin", "superadmin"])),
    tenant_id: str = Depends(get_tenant_id)
):
    _check_name_available(db, product.name, tenant_id)

    db_product = ProductModel(**product.model_dump(), tenant_id=tenant_id, created_by=get_user_identifier(user))
    db.add(db_product)
    db.commit()
    db.refresh(db_product)
    logger.info(f"Product '{db_product.name}' created by user {get_user_identifier(user)} for tenant {tenant_id}")
    return db_product

@router.get("/", response_model=List[Product])
def read_products(
    active_only: bool = False,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    query = db.query(ProductModel).filter(ProductModel.tenant_id == tenant_id)
    if active_only:
        query = query.filter(ProductModel.is_active.is_(True))
    return query.order_by(ProductModel.name).all()

@router.get("/{product_id}", response_model=Product)
def read_product(
    product_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    return _get_product(db, product_id, tenant_id)

@router.patch("/{product_id}", response_model=Product)
def update_product(
    product_id: int,
    product: ProductUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_group(["staff", "admin", "superadmin"])),
    tenant_id: str = Depends(get_tenant_id)
):
    db_product = _get_product(db, product_id, tenant_id)
    if product.name and product.name != db_product.name:
        _check_name_available(db, product.name, tenant_id)

    old_values = sqlalchemy_to_dict(db_product)
    for key, value in product.model_dump(exclude_unset=True).items():
        setattr(db_product, key, value)
    db_product.updated_at = local_now()
    db_product.updated_by = get_user_identifier(user)
    new_values = sqlalchemy_to_dict(db_product)

    log_entry = AuditLogCreate(
        tenant_id=tenant_id,
        table_name='products',
        record_id=product_id,
        changed_by=get_user_identifier(user),
        action='UPDATE',
        old_values=old_values,
        new_values=new_values
    )
    create_audit_log(db=db, log_entry=log_entry)
    db.commit()
    db.refresh(db_product)
    logger.info(f"Product '{db_product.name}' (ID: {product_id}) updated by user {get_user_identifier(user)} for tenant {tenant_id}")
    return db_product

@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(
    product_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_group(["admin", "superadmin"])),
    tenant_id: str = Depends(get_tenant_id)
):
    db_product = _get_product(db, product_id, tenant_id)
    db_product.deleted_at = local_now()
    db_product.deleted_by = get_user_identifier(user)
    db.commit()
    logger.info(f"Product '{db_product.name}' (ID: {product_id}) deleted by user {get_user_identifier(user)} for tenant {tenant_id}")
