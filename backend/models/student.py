"""Student roster model definitions."""

import re

from sqlalchemy import Column, Integer, String
from backend.database import Base

PRN_PATTERN = re.compile(r"[0-9]{12}")


def is_valid_prn(prn: str | None) -> bool:
    return prn is not None and PRN_PATTERN.fullmatch(prn) is not None


class Student(Base):
    """Represents an entry on the official student roster."""
    __tablename__ = "students"

    prn = Column(String(12), primary_key=True)
    name = Column(String, nullable=False)
    course = Column(String, nullable=False)
    year = Column(Integer, nullable=False)
