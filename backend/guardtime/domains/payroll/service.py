"""Payroll rollup: turns period earnings into per-employee payslips."""

from __future__ import annotations

from datetime import datetime
from functools import lru_cache
from typing import Optional

from sqlalchemy.orm import Session

from guardtime.core.config import settings
from guardtime.core.errors import ConflictError, NotFoundError
from guardtime.core.logging import get_logger
from guardtime.domains.payroll.schemas import PayPeriodCreate, PayrollRunCreate, PayslipItem
from guardtime.domains.payroll.state import PayrollRunStateMachine, RunStatus
from guardtime.models import Employee, EmployeePayslip, PayPeriod, PayrollRun, Timesheet
from payslips.calculator import PayslipCalculator
from payslips.gov_tables import GovTableRepository
from payslips.models import AmountLine, EarningLine, PayslipRequest, PayslipResult
from payslips.wizard import PreviewTotals, PreviewWizard

logger = get_logger(__name__)


@lru_cache
def get_calculator() -> PayslipCalculator:
    repo = GovTableRepository(settings.gov_tables_path) if settings.gov_tables_path else GovTableRepository()
    return PayslipCalculator(repo, settings.gov_table_version)


def _lines(items) -> list[AmountLine]:
    return [AmountLine(name=item.name, amount=item.amount) for item in items]


def _detail(lines: list[AmountLine]) -> list[dict]:
    return [{"name": line.name, "amount": round(line.amount, 2)} for line in lines]


class PayrollRollupService:
    def __init__(self, db: Session, calculator: Optional[PayslipCalculator] = None):
        self.db = db
        self.calculator = calculator or get_calculator()

    # Pay periods and runs

    def create_pay_period(self, payload: PayPeriodCreate) -> PayPeriod:
        code = payload.code.strip()
        if self.db.query(PayPeriod).filter(PayPeriod.code == code).one_or_none():
            raise ConflictError(f"Pay period {code} already exists")
        period = PayPeriod(code=code, start_date=payload.start_date, end_date=payload.end_date, status="OPEN")
        self.db.add(period)
        self.db.flush()
        logger.info("pay_period_created", pay_period_id=period.id, code=code)
        return period

    def get_run(self, run_id: int) -> PayrollRun:
        run = self.db.get(PayrollRun, run_id)
        if run is None:
            raise NotFoundError("Payroll run", run_id)
        return run

    def create_run(self, payload: PayrollRunCreate, created_by: Optional[str] = None) -> PayrollRun:
        period = self.db.get(PayPeriod, payload.pay_period_id)
        if period is None:
            raise NotFoundError("Pay period", payload.pay_period_id)
        if period.status != "OPEN":
            raise ConflictError(f"Pay period {period.code} is closed")
        duplicate = (
            self.db.query(PayrollRun)
            .filter(PayrollRun.pay_period_id == period.id, PayrollRun.payroll_type == payload.payroll_type)
            .one_or_none()
        )
        if duplicate:
            raise ConflictError(f"A {payload.payroll_type} run already exists for {period.code}")

        run = PayrollRun(
            pay_period_id=period.id,
            payroll_type=payload.payroll_type,
            status=RunStatus.DRAFT.value,
            created_by=created_by,
        )
        self.db.add(run)
        self.db.flush()
        logger.info("payroll_run_created", payroll_run_id=run.id, pay_period=period.code)
        return run

    # Earnings and calculation

    def earnings_from_timesheet(self, timesheet_id: int, employee: Employee) -> tuple[float, float, float]:
        """Peso amounts for the timesheet's period hours at the employee's hourly rate."""
        timesheet = self.db.get(Timesheet, timesheet_id)
        if timesheet is None:
            raise NotFoundError("Timesheet", timesheet_id)
        rate = float(employee.hourly_rate or 0)
        lines = (
            EarningLine("basic", timesheet.regular_hours, rate),
            EarningLine("overtime", timesheet.overtime_hours, rate * settings.overtime_premium),
            EarningLine("night_diff", timesheet.night_differential, rate),
        )
        return tuple(line.amount for line in lines)

    def build_request(self, item: PayslipItem, employee: Employee) -> PayslipRequest:
        basic, overtime, night_diff = item.basic_pay, item.overtime_pay, item.night_diff_pay
        if item.timesheet_id is not None and None in (basic, overtime, night_diff):
            derived = self.earnings_from_timesheet(item.timesheet_id, employee)
            # Explicit amounts win over derived ones
            basic = derived[0] if basic is None else basic
            overtime = derived[1] if overtime is None else overtime
            night_diff = derived[2] if night_diff is None else night_diff

        return PayslipRequest(
            employee_id=str(employee.id),
            basic_pay=basic or 0.0,
            overtime_pay=overtime or 0.0,
            night_diff_pay=night_diff or 0.0,
            holiday_pay=item.holiday_pay,
            allowances=_lines(item.allowances),
            loans=_lines(item.loans),
            other_deductions=_lines(item.other_deductions),
            absences=item.absences,
            tardiness=item.tardiness,
            sss_ee=item.sss_ee,
            philhealth_ee=item.philhealth_ee,
            hdmf_ee=item.hdmf_ee,
            withholding_tax=item.withholding_tax,
        )

    def _employee(self, employee_id: int) -> Employee:
        employee = self.db.get(Employee, employee_id)
        if employee is None:
            raise NotFoundError("Employee", employee_id)
        return employee

    def _write(self, payslip: EmployeePayslip, request: PayslipRequest, result: PayslipResult) -> None:
        payslip.basic_pay = result.basic_pay
        payslip.overtime_pay = result.overtime_pay
        payslip.night_diff_pay = result.night_diff_pay
        payslip.holiday_pay = result.holiday_pay
        payslip.allowances_total = result.allowances_total
        payslip.allowances_detail = _detail(request.allowances)
        payslip.absences_amount = result.absences
        payslip.tardiness_amount = result.tardiness
        payslip.loans_total = result.loans_total
        payslip.loans_detail = _detail(request.loans)
        payslip.other_deductions_total = result.other_deductions_total
        payslip.other_deductions_detail = _detail(request.other_deductions)
        payslip.sss_ee = result.sss.employee
        payslip.sss_er = result.sss.employer
        payslip.philhealth_ee = result.philhealth.employee
        payslip.philhealth_er = result.philhealth.employer
        payslip.hdmf_ee = result.hdmf.employee
        payslip.hdmf_er = result.hdmf.employer
        payslip.taxable_income = result.taxable_income
        payslip.withholding_tax = result.withholding_tax
        payslip.tax_status = result.tax.status.value
        payslip.tax_bracket = result.tax.bracket
        payslip.gross_pay = result.gross_pay
        payslip.total_deductions = result.total_deductions
        payslip.net_pay = result.net_pay

    def generate_payslips(self, run_id: int, items: list[PayslipItem]) -> list[EmployeePayslip]:
        """Create or recompute one DRAFT payslip per employee of a DRAFT run."""
        run = self.get_run(run_id)
        if not PayrollRunStateMachine.can_modify_payslips(run.status):
            raise ConflictError(f"Payslips of a {run.status} payroll run cannot be changed")

        generated = []
        for item in items:
            employee = self._employee(item.employee_id)
            payslip = (
                self.db.query(EmployeePayslip)
                .filter(EmployeePayslip.payroll_run_id == run.id, EmployeePayslip.employee_id == employee.id)
                .one_or_none()
            )
            if payslip is not None and payslip.status != RunStatus.DRAFT.value:
                raise ConflictError(f"Payslip {payslip.id} is {payslip.status} and cannot be regenerated")
            if payslip is None:
                payslip = EmployeePayslip(payroll_run_id=run.id, employee_id=employee.id, status="DRAFT")
                self.db.add(payslip)

            request = self.build_request(item, employee)
            result = self.calculator.calculate_employee(request)
            payslip.timesheet_id = item.timesheet_id
            self._write(payslip, request, result)
            self.db.flush()
            generated.append(payslip)

            if not result.tax.matched:
                logger.warning(
                    "tax_bracket_missing",
                    payroll_run_id=run.id,
                    employee_id=employee.id,
                    taxable_income=result.taxable_income,
                )
            logger.info(
                "payslip_generated",
                payroll_run_id=run.id,
                employee_id=employee.id,
                gross_pay=result.gross_pay,
                net_pay=result.net_pay,
            )
        return generated

    def preview(self, run_id: int, items: list[PayslipItem]) -> PreviewTotals:
        self.get_run(run_id)
        requests = [self.build_request(item, self._employee(item.employee_id)) for item in items]
        return PreviewWizard(self.calculator).preview(requests)

    def list_payslips(self, run_id: int) -> list[EmployeePayslip]:
        self.get_run(run_id)
        return (
            self.db.query(EmployeePayslip)
            .filter(EmployeePayslip.payroll_run_id == run_id)
            .order_by(EmployeePayslip.employee_id.asc())
            .all()
        )

    def get_payslip(self, payslip_id: int) -> EmployeePayslip:
        payslip = self.db.get(EmployeePayslip, payslip_id)
        if payslip is None:
            raise NotFoundError("Payslip", payslip_id)
        return payslip

    # Status transitions

    def transition(self, run_id: int, target: RunStatus, reason: Optional[str] = None) -> PayrollRun:
        run = self.get_run(run_id)
        PayrollRunStateMachine.validate_transition(run.status, target.value)
        if target is RunStatus.APPROVED and not run.payslips:
            raise ConflictError("Payroll run has no payslips to approve")

        previous = run.status
        run.status = target.value
        if target is RunStatus.VOIDED:
            run.void_reason = (reason or "").strip() or None
            run.voided_at = datetime.utcnow()
        else:
            for payslip in run.payslips:
                payslip.status = target.value
        self.db.flush()
        logger.info("payroll_run_transitioned", payroll_run_id=run.id, from_status=previous, to_status=run.status)
        return run
