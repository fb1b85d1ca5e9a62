from sqlalchemy import Column, Integer, Numeric, Date, String, ForeignKey, Text, Enum
from sqlalchemy.orm import relationship
from database import Base
import enum
from models.audit_mixin import AuditMixin

class PaymentType(enum.Enum):
    CHEQUE = "cheque"
    FONEPAY = "fonepay"
    CASH = "cash"
    BANK_TRANSFER = "bank_transfer"

class PaymentDirection(enum.Enum):
    RECEIVED = "received"
    PAID = "paid"

class Payment(Base, AuditMixin):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, index=True)
    party_id = Column(Integer, ForeignKey("parties.id"), nullable=False, index=True)
    payment_type = Column(Enum(PaymentType), nullable=False)
    direction = Column(Enum(PaymentDirection), default=PaymentDirection.RECEIVED, nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    payment_date = Column(Date, nullable=False, index=True)
    deposited_date = Column(Date, nullable=True)
    reference_number = Column(String, nullable=True)  # Cheque number, transaction ID etc.
    description = Column(Text, nullable=True)

    # Relationships
    party = relationship("Party", foreign_keys=[party_id])
