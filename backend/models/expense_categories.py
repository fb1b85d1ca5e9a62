from sqlalchemy import Column, Integer, String, Text, UniqueConstraint
from database import Base
from models.audit_mixin import AuditMixin

class ExpenseCategory(Base, AuditMixin):
    __tablename__ = "expense_categories"
    __table_args__ = (UniqueConstraint('tenant_id', 'name', name='_tenant_expense_category_uc'),)

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
