from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from guardtime.db.session import Base


class Timelog(Base):
    __tablename__ = "timelogs"

    id = Column(Integer, primary_key=True, index=True)
    dtr_id = Column(Integer, ForeignKey("dtrs.id", ondelete="CASCADE"), nullable=False, index=True)
    mode = Column(String(3), nullable=False, default="in")  # in|out
    timestamp = Column(DateTime, nullable=False)  # naive local wall time

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    dtr = relationship("DTR", back_populates="timelogs")
    clock_events = relationship(
        "ClockEvent",
        back_populates="timelog",
        cascade="all, delete-orphan",
    )
