from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer
from sqlalchemy.orm import relationship

from guardtime.db.session import Base


class ClockEvent(Base):
    __tablename__ = "clock_events"

    id = Column(Integer, primary_key=True, index=True)
    # At most one clock event per timelog
    timelog_id = Column(
        Integer, ForeignKey("timelogs.id", ondelete="CASCADE"), nullable=False, unique=True, index=True
    )
    clock_time = Column(DateTime, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    timelog = relationship("Timelog", back_populates="clock_events")
