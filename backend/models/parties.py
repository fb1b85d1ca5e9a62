from sqlalchemy import Column, Integer, String, Text, Enum, Boolean, Numeric, UniqueConstraint
from database import Base
import enum
from models.audit_mixin import AuditMixin

class PartyRole(enum.Enum):
    VENDOR = "vendor"
    SUPPLIER = "supplier"
    CUSTOMER = "customer"

class Party(Base, AuditMixin):
    __tablename__ = "parties"
    __table_args__ = (UniqueConstraint('tenant_id', 'pan_number', name='_tenant_pan_number_uc'),)

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, index=True)
    name = Column(String, nullable=False)
    phone = Column(String, nullable=False)
    alt_phone = Column(String, nullable=True)
    contact_person = Column(String, nullable=True)
    email = Column(String, nullable=True)
    address = Column(Text, nullable=False)
    pan_number = Column(String, nullable=False)
    is_vatable = Column(Boolean, default=True, nullable=False)
    party_margin = Column(Numeric(5, 2), default=0, nullable=False)
    # Balance carried in from before the first recorded transaction; seeds every statement
    opening_balance = Column(Numeric(14, 2), default=0, server_default='0', nullable=False)
    website = Column(String, nullable=True)
    role = Column(Enum(PartyRole), nullable=False, index=True)
