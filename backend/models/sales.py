from sqlalchemy import Column, Integer, String, Text, Numeric, Date, ForeignKey, Boolean
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import AuditMixin

class Sale(Base, AuditMixin):
    __tablename__ = "sales"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, index=True)
    billing_party_id = Column(Integer, ForeignKey("parties.id"), nullable=False, index=True)
    invoice_number = Column(String, nullable=False)
    invoice_date = Column(Date, nullable=False, index=True)

    # Direct entry (used instead of items)
    direct_entry_description = Column(Text, nullable=True)
    direct_entry_amount = Column(Numeric(14, 2), nullable=True)

    discount_percentage = Column(Numeric(5, 2), default=0, nullable=False)
    discount_amount = Column(Numeric(14, 2), default=0, nullable=False)
    sub_total = Column(Numeric(14, 2), default=0, nullable=False)
    taxable_amount = Column(Numeric(14, 2), default=0, nullable=False)
    vat_amount = Column(Numeric(14, 2), default=0, nullable=False)
    grand_total = Column(Numeric(14, 2), default=0, nullable=False)

    note = Column(Text, nullable=True)
    is_vatable = Column(Boolean, default=True, nullable=False)

    # Relationships
    billing_party = relationship("Party", foreign_keys=[billing_party_id])
    items = relationship("SaleItem", back_populates="sale", cascade="all, delete-orphan")
