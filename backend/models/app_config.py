from sqlalchemy import Column, Integer, String, Text, UniqueConstraint
from database import Base
from models.audit_mixin import TimestampMixin

# Keys read when rendering printed and exported statements
BUSINESS_NAME = "business_name"
BUSINESS_ADDRESS = "business_address"
CURRENCY_LABEL = "currency_label"
STATEMENT_KEYS = (BUSINESS_NAME, BUSINESS_ADDRESS, CURRENCY_LABEL)

class AppConfig(Base, TimestampMixin):
    """Per-tenant name/value setting."""
    __tablename__ = "app_config"
    __table_args__ = (UniqueConstraint('tenant_id', 'name', name='_app_config_tenant_name_uc'),)

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, nullable=False, index=True)
    name = Column(String(100), nullable=False)
    value = Column(Text, nullable=False)
    description = Column(String(255), nullable=True)
