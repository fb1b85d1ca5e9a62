from sqlalchemy import Column, Integer, String, Text, Numeric, Date, ForeignKey, Boolean
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import AuditMixin

class Expense(Base, AuditMixin):
    __tablename__ = 'expenses'

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, index=True)
    category_id = Column(Integer, ForeignKey("expense_categories.id"), nullable=False)
    # Most expenses are company level; set only when the expense is owed to/by a party
    party_id = Column(Integer, ForeignKey("parties.id"), nullable=True, index=True)
    invoice_number = Column(String, nullable=True)
    invoice_date = Column(Date, nullable=False, index=True)
    amount = Column(Numeric(14, 2), nullable=False)
    description = Column(Text, nullable=False)
    is_vatable = Column(Boolean, default=False, nullable=False)

    # Relationships
    category = relationship("ExpenseCategory")
    party = relationship("Party", foreign_keys=[party_id])
