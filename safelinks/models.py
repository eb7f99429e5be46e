from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, func

from safelinks.database import Base
from safelinks.validator import MAX_URL_LENGTH


class ShortUrl(Base):
    __tablename__ = "urls"

    id = Column(Integer, primary_key=True, index=True)
    # The unique index is what actually prevents two records sharing a code
    code = Column(String(16), unique=True, index=True, nullable=False)
    original_url = Column(String(MAX_URL_LENGTH), index=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Report(Base):
    __tablename__ = "reports"

    id = Column(Integer, primary_key=True, index=True)
    url_code = Column(String(16), ForeignKey("urls.code"), index=True, nullable=False)
    reason = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
