"""Marketplace item model definitions."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, Text, func
from backend.database import Base


class MarketplaceItem(Base):
    """Represents an item listed for sale by a student."""
    __tablename__ = "marketplace_items"

    id = Column(Integer, primary_key=True, index=True)
    seller_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text)
    price = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    image_url = Column(String)
    created_at = Column(DateTime, server_default=func.now())
