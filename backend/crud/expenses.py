from sqlalchemy.orm import Session
from crud.audit_log import create_audit_log
from schemas.audit_log import AuditLogCreate
from utils import local_now, sqlalchemy_to_dict
from models.expenses import Expense
from models.expense_categories import ExpenseCategory
from schemas import expenses as schemas
from datetime import date
from typing import List, Optional

def get_expense(db: Session, expense_id: int, tenant_id: str):
    return db.query(Expense).filter(Expense.id == expense_id, Expense.tenant_id == tenant_id).first()

def get_expenses_by_date_range(db: Session, start_date: date, end_date: date, tenant_id: str, category_id: Optional[int] = None) -> List[Expense]:
    query = db.query(Expense).filter(
        Expense.tenant_id == tenant_id,
        Expense.invoice_date >= start_date,
        Expense.invoice_date <= end_date
    )
    if category_id is not None:
        query = query.filter(Expense.category_id == category_id)
    return query.order_by(Expense.invoice_date.asc(), Expense.id.asc()).all()

def create_expense(db: Session, expense: schemas.ExpenseCreate, tenant_id: str, user_id: str):
    db_expense = Expense(**expense.model_dump(), tenant_id=tenant_id, created_by=user_id)
    db.add(db_expense)
    db.commit()
    db.refresh(db_expense)
    return db_expense

def update_expense(db: Session, expense_id: int, expense: schemas.ExpenseUpdate, tenant_id: str, user_id: str):
    db_expense = get_expense(db, expense_id, tenant_id)
    if db_expense:
        old_values = sqlalchemy_to_dict(db_expense)
        for key, value in expense.model_dump(exclude_unset=True).items():
            setattr(db_expense, key, value)
        db_expense.updated_at = local_now()
        db_expense.updated_by = user_id
        new_values = sqlalchemy_to_dict(db_expense)
        log_entry = AuditLogCreate(
            tenant_id=tenant_id,
            table_name='expenses',
            record_id=expense_id,
            changed_by=user_id,
            action='UPDATE',
            old_values=old_values,
            new_values=new_values
        )
        create_audit_log(db=db, log_entry=log_entry)
        db.commit()
        db.refresh(db_expense)
    return db_expense

def delete_expense(db: Session, expense_id: int, tenant_id: str, user_id: str):
    db_expense = get_expense(db, expense_id, tenant_id)
    if db_expense:
        old_values = sqlalchemy_to_dict(db_expense)
        # Soft-delete
        db_expense.deleted_at = local_now()
        db_expense.deleted_by = user_id
        new_values = sqlalchemy_to_dict(db_expense)
        log_entry = AuditLogCreate(
            tenant_id=tenant_id,
            table_name='expenses',
            record_id=expense_id,
            changed_by=user_id,
            action='DELETE',
            old_values=old_values,
            new_values=new_values
        )
        create_audit_log(db=db, log_entry=log_entry)
        db.commit()
    return db_expense

def get_category(db: Session, category_id: int, tenant_id: str):
    return db.query(ExpenseCategory).filter(ExpenseCategory.id == category_id, ExpenseCategory.tenant_id == tenant_id).first()

def get_category_by_name(db: Session, name: str, tenant_id: str):
    # Includes deleted categories; their names still count under _tenant_expense_category_uc
    return db.query(ExpenseCategory).execution_options(include_deleted=True).filter(ExpenseCategory.name == name, ExpenseCategory.tenant_id == tenant_id).first()

def get_categories(db: Session, tenant_id: str) -> List[ExpenseCategory]:
    return db.query(ExpenseCategory).filter(ExpenseCategory.tenant_id == tenant_id).order_by(ExpenseCategory.name).all()

def create_category(db: Session, category: schemas.ExpenseCategoryCreate, tenant_id: str, user_id: str):
    db_category = ExpenseCategory(**category.model_dump(), tenant_id=tenant_id, created_by=user_id)
    db.add(db_category)
    db.commit()
    db.refresh(db_category)
    return db_category

def update_category(db: Session, category_id: int, category: schemas.ExpenseCategoryUpdate, tenant_id: str, user_id: str):
    db_category = get_category(db, category_id, tenant_id)
    if db_category:
        for key, value in category.model_dump(exclude_unset=True).items():
            setattr(db_category, key, value)
        db_category.updated_at = local_now()
        db_category.updated_by = user_id
        db.commit()
        db.refresh(db_category)
    return db_category

def category_in_use(db: Session, category_id: int, tenant_id: str) -> bool:
    return db.query(Expense.id).filter(Expense.category_id == category_id, Expense.tenant_id == tenant_id, Expense.deleted_at.is_(None)).first() is not None

def delete_category(db: Session, category_id: int, tenant_id: str, user_id: str):
    db_category = get_category(db, category_id, tenant_id)
    if db_category:
        db_category.deleted_at = local_now()
        db_category.deleted_by = user_id
        db.commit()
    return db_category
