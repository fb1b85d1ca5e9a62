from sqlalchemy import Column, Integer, String, Text, Numeric, Date, ForeignKey, Boolean
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import AuditMixin

class Purchase(Base, AuditMixin):
    __tablename__ = "purchases"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, index=True)
    supplied_by_id = Column(Integer, ForeignKey("parties.id"), nullable=False, index=True)
    invoice_number = Column(String, nullable=False)
    invoice_date = Column(Date, nullable=False, index=True)
    amount = Column(Numeric(14, 2), nullable=False)
    is_vatable = Column(Boolean, default=True, nullable=False)
    description = Column(Text, nullable=False)
    note = Column(Text, nullable=True)

    # Relationships
    supplied_by = relationship("Party", foreign_keys=[supplied_by_id])
