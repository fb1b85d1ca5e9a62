from sqlalchemy import Column, Integer, Numeric, Date, String, ForeignKey, Text, Enum
from sqlalchemy.orm import relationship
from database import Base
import enum
from models.audit_mixin import AuditMixin

class ReturnType(enum.Enum):
    CREDIT_NOTE = "credit_note"  # goods returned by a customer
    DEBIT_NOTE = "debit_note"    # goods returned to a supplier

class Return(Base, AuditMixin):
    __tablename__ = "returns"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, index=True)
    returned_by_id = Column(Integer, ForeignKey("parties.id"), nullable=False, index=True)
    return_type = Column(Enum(ReturnType), default=ReturnType.CREDIT_NOTE, nullable=False)
    invoice_number = Column(String, nullable=False)
    return_date = Column(Date, nullable=False, index=True)
    amount = Column(Numeric(14, 2), nullable=False)
    description = Column(Text, nullable=True)

    # Relationships
    returned_by = relationship("Party", foreign_keys=[returned_by_id])
