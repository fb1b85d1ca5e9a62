from sqlalchemy import Column, Integer, String, Text, Numeric, Boolean, UniqueConstraint
from database import Base
from models.audit_mixin import AuditMixin

class Product(Base, AuditMixin):
    __tablename__ = "products"
    __table_args__ = (UniqueConstraint('tenant_id', 'name', name='_tenant_product_name_uc'),)

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, index=True)
    name = Column(String, nullable=False)
    code = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    mrp = Column(Numeric(12, 2), nullable=False)  # VAT inclusive
    is_active = Column(Boolean, default=True, nullable=False)
