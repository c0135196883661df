from datetime import datetime

from sqlalchemy import Column, Date, DateTime, Float, ForeignKey, Integer
from sqlalchemy.orm import relationship

from guardtime.db.session import Base


class DTR(Base):
    """Daily time record: one calendar day of one timesheet."""

    __tablename__ = "dtrs"

    id = Column(Integer, primary_key=True, index=True)
    timesheet_id = Column(Integer, ForeignKey("timesheets.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False)

    regular_hours = Column(Float, nullable=False, default=0.0)
    overtime_hours = Column(Float, nullable=False, default=0.0)
    night_differential = Column(Float, nullable=False, default=0.0)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    timesheet = relationship("Timesheet", back_populates="dtrs")
    timelogs = relationship(
        "Timelog",
        back_populates="dtr",
        cascade="all, delete-orphan",
        order_by="Timelog.timestamp",
    )
