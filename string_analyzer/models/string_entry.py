from sqlalchemy import Column, String, Text, JSON

from string_analyzer.database import Base


class StringEntry(Base):
    __tablename__ = "strings"

    id = Column(String(64), primary_key=True)  # SHA-256 hash
    value = Column(Text, unique=True, nullable=False)
    properties = Column(JSON, nullable=False)
    created_at = Column(String(20), nullable=False)
