from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import relationship

from guardtime.db.session import Base


class EmployeePayslip(Base):
    __tablename__ = "employee_payslips"
    __table_args__ = (UniqueConstraint("payroll_run_id", "employee_id", name="uq_payslips_run_employee"),)

    id = Column(Integer, primary_key=True, index=True)
    payroll_run_id = Column(Integer, ForeignKey("payroll_runs.id", ondelete="CASCADE"), nullable=False, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    timesheet_id = Column(Integer, ForeignKey("timesheets.id", ondelete="SET NULL"), nullable=True)

    # Earnings
    basic_pay = Column(Numeric(scale=2), nullable=False, default=0)
    overtime_pay = Column(Numeric(scale=2), nullable=False, default=0)
    night_diff_pay = Column(Numeric(scale=2), nullable=False, default=0)
    holiday_pay = Column(Numeric(scale=2), nullable=False, default=0)
    allowances_total = Column(Numeric(scale=2), nullable=False, default=0)
    allowances_detail = Column(JSON, nullable=False, default=list)

    # Deductions
    absences_amount = Column(Numeric(scale=2), nullable=False, default=0)
    tardiness_amount = Column(Numeric(scale=2), nullable=False, default=0)
    loans_total = Column(Numeric(scale=2), nullable=False, default=0)
    loans_detail = Column(JSON, nullable=False, default=list)
    other_deductions_total = Column(Numeric(scale=2), nullable=False, default=0)
    other_deductions_detail = Column(JSON, nullable=False, default=list)
    sss_ee = Column(Numeric(scale=2), nullable=False, default=0)
    sss_er = Column(Numeric(scale=2), nullable=False, default=0)
    philhealth_ee = Column(Numeric(scale=2), nullable=False, default=0)
    philhealth_er = Column(Numeric(scale=2), nullable=False, default=0)
    hdmf_ee = Column(Numeric(scale=2), nullable=False, default=0)
    hdmf_er = Column(Numeric(scale=2), nullable=False, default=0)
    taxable_income = Column(Numeric(scale=2), nullable=False, default=0)
    withholding_tax = Column(Numeric(scale=2), nullable=False, default=0)
    tax_status = Column(String(20), nullable=False, default="bracket")  # bracket|no_bracket|override
    tax_bracket = Column(Integer, nullable=True)

    # Totals
    gross_pay = Column(Numeric(scale=2), nullable=False, default=0)
    total_deductions = Column(Numeric(scale=2), nullable=False, default=0)
    net_pay = Column(Numeric(scale=2), nullable=False, default=0)

    status = Column(String(20), nullable=False, default="DRAFT")  # DRAFT|APPROVED|PAID
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    payroll_run = relationship("PayrollRun", back_populates="payslips")
    employee = relationship("Employee")
