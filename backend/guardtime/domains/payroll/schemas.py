from __future__ import annotations

import datetime as dt
from typing import Annotated

from pydantic import Field, model_validator

from guardtime.core.schemas import RequestModel, ResponseModel

Amount = Annotated[float, Field(ge=0)]


class PayPeriodCreate(RequestModel):
    code: str = Field(min_length=1, max_length=20)
    start_date: dt.date
    end_date: dt.date

    @model_validator(mode="after")
    def check_range(self) -> "PayPeriodCreate":
        if self.end_date < self.start_date:
            raise ValueError("endDate must not be earlier than startDate")
        return self


class PayPeriodOut(ResponseModel):
    id: int
    code: str
    start_date: dt.date
    end_date: dt.date
    status: str


class PayrollRunCreate(RequestModel):
    pay_period_id: int
    payroll_type: str = "REGULAR"


class VoidRunRequest(RequestModel):
    reason: Annotated[str, Field(min_length=3, max_length=255)]


class PayrollRunOut(ResponseModel):
    id: int
    pay_period_id: int
    payroll_type: str
    status: str
    created_by: str | None = None
    void_reason: str | None = None
    voided_at: dt.datetime | None = None
    created_at: dt.datetime | None = None


class AmountItem(RequestModel):
    name: str = Field(min_length=1)
    amount: Amount


class PayslipItem(RequestModel):
    """Inputs for one employee; omitted earnings are derived from ``timesheet_id``."""

    employee_id: int
    timesheet_id: int | None = None
    basic_pay: Amount | None = None
    overtime_pay: Amount | None = None
    night_diff_pay: Amount | None = None
    holiday_pay: Amount = 0.0
    allowances: list[AmountItem] = Field(default_factory=list)
    loans: list[AmountItem] = Field(default_factory=list)
    other_deductions: list[AmountItem] = Field(default_factory=list)
    absences: Amount = 0.0
    tardiness: Amount = 0.0
    sss_ee: Amount | None = None
    philhealth_ee: Amount | None = None
    hdmf_ee: Amount | None = None
    withholding_tax: Amount | None = None


class PayslipBatch(RequestModel):
    items: list[PayslipItem] = Field(min_length=1)

    @model_validator(mode="after")
    def check_unique_employees(self) -> "PayslipBatch":
        seen = set()
        for item in self.items:
            if item.employee_id in seen:
                raise ValueError(f"employeeId {item.employee_id} appears more than once")
            seen.add(item.employee_id)
        return self


class PayslipOut(ResponseModel):
    id: int
    payroll_run_id: int
    employee_id: int
    timesheet_id: int | None = None
    basic_pay: float
    overtime_pay: float
    night_diff_pay: float
    holiday_pay: float
    allowances_total: float
    allowances_detail: list[dict]
    absences_amount: float
    tardiness_amount: float
    loans_total: float
    loans_detail: list[dict]
    other_deductions_total: float
    other_deductions_detail: list[dict]
    sss_ee: float
    sss_er: float
    philhealth_ee: float
    philhealth_er: float
    hdmf_ee: float
    hdmf_er: float
    taxable_income: float
    withholding_tax: float
    tax_status: str
    tax_bracket: int | None = None
    gross_pay: float
    total_deductions: float
    net_pay: float
    status: str


class PayslipListEnvelope(ResponseModel):
    payslips: list[PayslipOut]


class PreviewLine(ResponseModel):
    employee_id: int
    gross_pay: float
    total_deductions: float
    net_pay: float
    withholding_tax: float
    tax_status: str
    tax_bracket: int | None = None


class PreviewOut(ResponseModel):
    employees: list[PreviewLine]
    gross_pay: float
    total_deductions: float
    total_net_pay: float
    withholding_tax: float
    employee_contributions: dict[str, float]
    employer_contributions: dict[str, float]
    untaxed_employees: list[int]
