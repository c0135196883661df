from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from guardtime.db.session import Base


class PayrollRun(Base):
    __tablename__ = "payroll_runs"
    __table_args__ = (UniqueConstraint("pay_period_id", "payroll_type", name="uq_payroll_runs_period_type"),)

    id = Column(Integer, primary_key=True, index=True)
    pay_period_id = Column(Integer, ForeignKey("pay_periods.id"), nullable=False)
    payroll_type = Column(String(20), nullable=False, default="REGULAR")
    status = Column(String(20), nullable=False, default="DRAFT")  # DRAFT|APPROVED|PAID|VOIDED
    created_by = Column(String(255), nullable=True)
    void_reason = Column(String(255), nullable=True)
    voided_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    pay_period = relationship("PayPeriod")
    payslips = relationship("EmployeePayslip", back_populates="payroll_run", cascade="all, delete-orphan")
