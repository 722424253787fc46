from sqlalchemy import Column, String, DateTime, Text
from app.core.constants import CacheConfig
from app.core.db import Base


class SummaryCacheModel(Base):
    """
    SQLAlchemy ORM model representing a cached page or video summary.

    Attributes:
        url_hash (str): SHA-256 hex of the source URL (Primary Key).
        url (str): The exact source URL.
        last_modified (datetime): Freshness timestamp the summary was produced for.
        summary (str): The Markdown summary.
        expire_at (datetime): When the entry becomes eligible for purging.
    """
    __tablename__ = CacheConfig.TABLE_NAME

    url_hash = Column(String(CacheConfig.FINGERPRINT_LENGTH), primary_key=True)
    url = Column(Text, nullable=False)
    last_modified = Column(DateTime(timezone=True), nullable=False)
    summary = Column(Text, nullable=False)
    expire_at = Column(DateTime(timezone=True), nullable=False, index=True)
