from datetime import datetime

from sqlalchemy import Column, DateTime, Float, Integer, String
from sqlalchemy.orm import relationship

from guardtime.db.session import Base


class Timesheet(Base):
    __tablename__ = "timesheets"

    id = Column(Integer, primary_key=True, index=True)
    employee_name = Column(String(200), nullable=False)
    pay_period = Column(String(50), nullable=False)
    detachment = Column(String(200), nullable=False)
    shift = Column(String(20), nullable=False)  # Day Shift|Night Shift|Mid Shift

    # Sums over the timesheet's DTRs; written only by the recalculation service
    regular_hours = Column(Float, nullable=False, default=0.0)
    overtime_hours = Column(Float, nullable=False, default=0.0)
    night_differential = Column(Float, nullable=False, default=0.0)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    dtrs = relationship(
        "DTR",
        back_populates="timesheet",
        cascade="all, delete-orphan",
        order_by="DTR.date",
    )
