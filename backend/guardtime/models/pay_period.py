from datetime import datetime

from sqlalchemy import Column, Date, DateTime, Integer, String

from guardtime.db.session import Base


class PayPeriod(Base):
    __tablename__ = "pay_periods"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(20), nullable=False, unique=True)  # e.g. 2025-01-A
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    status = Column(String(20), nullable=False, default="OPEN")  # OPEN|CLOSED
    created_at = Column(DateTime, default=datetime.utcnow)
