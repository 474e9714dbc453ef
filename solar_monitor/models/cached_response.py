from sqlalchemy import Column, String, Float, DateTime, JSON
from solar_monitor.db.async_session import Base, utc_now


class CachedResponse(Base):
    __tablename__ = "cached_responses"

    key = Column(String(64), primary_key=True)
    payload = Column(JSON, nullable=False)

    # Epoch seconds of the fetch that produced the payload
    fetched_at = Column(Float, nullable=False)

    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)
