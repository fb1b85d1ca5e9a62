from datetime import date
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional
import logging
from database import get_db
from schemas import expenses as schemas
from crud import expenses as crud
from models.parties import Party as PartyModel
from utils.auth_utils import get_current_user, get_user_identifier, require_group
from utils.tenancy import get_tenant_id

router = APIRouter(
    prefix="/expenses",
    tags=["Expenses"],
)
categories_router = APIRouter(
    prefix="/expense-categories",
    tags=["Expense Categories"],
)
logger = logging.getLogger("expenses")


def _check_references(db: Session, tenant_id: str, category_id: Optional[int], party_id: Optional[int]):
    if category_id is not None and crud.get_category(db, category_id, tenant_id) is None:
        raise HTTPException(status_code=404, detail="Expense category not found")
    if party_id is not None:
        party = db.query(PartyModel).filter(PartyModel.id == party_id, PartyModel.tenant_id == tenant_id).first()
        if party is None:
            raise HTTPException(status_code=404, detail="Party not found")


@router.post("/", response_model=schemas.Expense, status_code=status.HTTP_201_CREATED)
def create_expense(
    expense: schemas.ExpenseCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_group(["staff", "admin", "superadmin"])),
    tenant_id: str = Depends(get_tenant_id)
):
    _check_references(db, tenant_id, expense.category_id, expense.party_id)
    db_expense = crud.create_expense(db=db, expense=expense, tenant_id=tenant_id, user_id=get_user_identifier(user))
    logger.info(f"Expense {db_expense.id} of {db_expense.amount} created by user {get_user_identifier(user)} for tenant {tenant_id}")
    return db_expense

@router.get("/", response_model=List[schemas.Expense])
def read_expenses(
    start_date: date,
    end_date: date,
    category_id: Optional[int] = None,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    if start_date > end_date:
        raise HTTPException(status_code=400, detail="Start date cannot be later than end date.")
    return crud.get_expenses_by_date_range(db=db, start_date=start_date, end_date=end_date, tenant_id=tenant_id, category_id=category_id)

@router.get("/{expense_id}", response_model=schemas.Expense)
def read_expense(
    expense_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    db_expense = crud.get_expense(db=db, expense_id=expense_id, tenant_id=tenant_id)
    if db_expense is None:
        raise HTTPException(status_code=404, detail="Expense not found")
    return db_expense

@router.patch("/{expense_id}", response_model=schemas.Expense)
def update_expense(
    expense_id: int,
    expense: schemas.ExpenseUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_group(["staff", "admin", "superadmin"])),
    tenant_id: str = Depends(get_tenant_id)
):
    _check_references(db, tenant_id, expense.category_id, expense.party_id)
    db_expense = crud.update_expense(db=db, expense_id=expense_id, expense=expense, tenant_id=tenant_id, user_id=get_user_identifier(user))
    if db_expense is None:
        raise HTTPException(status_code=404, detail="Expense not found")
    logger.info(f"Expense {expense_id} updated by user {get_user_identifier(user)} for tenant {tenant_id}")
    return db_expense

@router.delete("/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_expense(
    expense_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_group(["admin", "superadmin"])),
    tenant_id: str = Depends(get_tenant_id)
):
    db_expense = crud.delete_expense(db=db, expense_id=expense_id, tenant_id=tenant_id, user_id=get_user_identifier(user))
    if db_expense is None:
        raise HTTPException(status_code=404, detail="Expense not found")
    logger.info(f"Expense {expense_id} deleted by user {get_user_identifier(user)} for tenant {tenant_id}")


@categories_router.post("/", response_model=schemas.ExpenseCategory, status_code=status.HTTP_201_CREATED)
def create_category(
    category: schemas.ExpenseCategoryCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_group(["staff", "admin", "superadmin"])),
    tenant_id: str = Depends(get_tenant_id)
):
    if crud.get_category_by_name(db, category.name, tenant_id):
        raise HTTPException(status_code=400, detail="Expense category with this name already exists (including deleted categories)")
    db_category = crud.create_category(db=db, category=category, tenant_id=tenant_id, user_id=get_user_identifier(user))
    logger.info(f"Expense category '{db_category.name}' created by user {get_user_identifier(user)} for tenant {tenant_id}")
    return db_category

@categories_router.get("/", response_model=List[schemas.ExpenseCategory])
def read_categories(
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
    tenant_id: str = Depends(get_tenant_id)
):
    return crud.get_categories(db=db, tenant_id=tenant_id)

@categories_router.patch("/{category_id}", response_model=schemas.ExpenseCategory)
def update_category(
    category_id: int,
    category: schemas.ExpenseCategoryUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_group(["staff", "admin", "superadmin"])),
    tenant_id: str = Depends(get_tenant_id)
):
    if category.name:
        existing = crud.get_category_by_name(db, category.name, tenant_id)
        if existing and existing.id != category_id:
            raise HTTPException(status_code=400, detail="Expense category with this name already exists (including deleted categories)")
    db_category = crud.update_category(db=db, category_id=category_id, category=category, tenant_id=tenant_id, user_id=get_user_identifier(user))
    if db_category is None:
        raise HTTPException(status_code=404, detail="Expense category not found")
    return db_category

@categories_router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_group(["admin", "superadmin"])),
    tenant_id: str = Depends(get_tenant_id)
):
    if crud.category_in_use(db, category_id, tenant_id):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Expense category is used by existing expenses.")
    db_category = crud.delete_category(db=db, category_id=category_id, tenant_id=tenant_id, user_id=get_user_identifier(user))
    if db_category is None:
        raise HTTPException(status_code=404, detail="Expense category not found")
    logger.info(f"Expense category {category_id} deleted by user {get_user_identifier(user)} for tenant {tenant_id}")
