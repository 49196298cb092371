"""User model definitions."""

from sqlalchemy import Column, ForeignKey, Integer, String, Text
from backend.database import Base


class User(Base):
    """Represents a registered student account."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    prn = Column(String(12), ForeignKey("students.prn"), unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    name = Column(String, nullable=False)
    course = Column(String, nullable=False)
    year = Column(Integer, nullable=False)
    interests = Column(Text)
