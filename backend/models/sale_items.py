from sqlalchemy import Column, Integer, Numeric, ForeignKey, String
from sqlalchemy.orm import relationship
from database import Base

class SaleItem(Base):
    __tablename__ = "sale_items"

    id = Column(Integer, primary_key=True, index=True)
    sale_id = Column(Integer, ForeignKey("sales.id"), nullable=False)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    name = Column(String, nullable=True)
    quantity = Column(Numeric(10, 3), nullable=False)
    rate = Column(Numeric(12, 2), nullable=False)  # VAT exclusive
    amount = Column(Numeric(14, 2), nullable=False)
    tenant_id = Column(String, index=True)

    # Relationships
    sale = relationship("Sale", back_populates="items")
    product = relationship("Product")
