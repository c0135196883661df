from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from guardtime.core.security import require_caller, require_caller_with_role
from guardtime.db.session import get_session
from guardtime.domains.payroll.schemas import (
    PayPeriodCreate,
    PayPeriodOut,
    PayrollRunCreate,
    PayrollRunOut,
    PayslipBatch,
    PayslipListEnvelope,
    PayslipOut,
    PreviewLine,
    PreviewOut,
    VoidRunRequest,
)
from guardtime.domains.payroll.service import PayrollRollupService, get_calculator
from guardtime.domains.payroll.state import RunStatus
from guardtime.models import PayPeriod, PayrollRun, User
from payslips.calculator import PayslipCalculator

router = APIRouter(prefix="/payroll", tags=["payroll"])
pay_period_router = APIRouter(prefix="/pay-periods", tags=["payroll"])
payslip_router = APIRouter(prefix="/payslips", tags=["payroll"])

require_payroll = require_caller_with_role("payroll")


def get_rollup_service(
    db: Session = Depends(get_session),
    calculator: PayslipCalculator = Depends(get_calculator),
) -> PayrollRollupService:
    return PayrollRollupService(db, calculator)


@pay_period_router.get("", response_model=list[PayPeriodOut])
def list_pay_periods(db: Session = Depends(get_session), caller: User = Depends(require_caller)):
    rows = db.query(PayPeriod).order_by(PayPeriod.start_date.desc(), PayPeriod.id.desc()).all()
    return [PayPeriodOut.model_validate(row) for row in rows]


@pay_period_router.post("", response_model=PayPeriodOut, status_code=201)
def create_pay_period(
    payload: PayPeriodCreate,
    db: Session = Depends(get_session),
    rollup: PayrollRollupService = Depends(get_rollup_service),
    caller: User = Depends(require_payroll),
):
    period = rollup.create_pay_period(payload)
    db.commit()
    db.refresh(period)
    return PayPeriodOut.model_validate(period)


@router.get("/runs", response_model=list[PayrollRunOut])
def list_runs(db: Session = Depends(get_session), caller: User = Depends(require_caller)):
    rows = db.query(PayrollRun).order_by(PayrollRun.created_at.desc(), PayrollRun.id.desc()).all()
    return [PayrollRunOut.model_validate(row) for row in rows]


@router.post("/runs", response_model=PayrollRunOut, status_code=201)
def create_run(
    payload: PayrollRunCreate,
    db: Session = Depends(get_session),
    rollup: PayrollRollupService = Depends(get_rollup_service),
    caller: User = Depends(require_payroll),
):
    run = rollup.create_run(payload, created_by=caller.email)
    db.commit()
    db.refresh(run)
    return PayrollRunOut.model_validate(run)


@router.post("/runs/{run_id}/payslips", response_model=PayslipListEnvelope)
def generate_payslips(
    run_id: int,
    payload: PayslipBatch,
    db: Session = Depends(get_session),
    rollup: PayrollRollupService = Depends(get_rollup_service),
    caller: User = Depends(require_payroll),
):
    payslips = rollup.generate_payslips(run_id, payload.items)
    db.commit()
    for payslip in payslips:
        db.refresh(payslip)
    return PayslipListEnvelope(payslips=[PayslipOut.model_validate(p) for p in payslips])


@router.get("/runs/{run_id}/payslips", response_model=PayslipListEnvelope)
def list_payslips(
    run_id: int,
    rollup: PayrollRollupService = Depends(get_rollup_service),
    caller: User = Depends(require_caller),
):
    return PayslipListEnvelope(payslips=[PayslipOut.model_validate(p) for p in rollup.list_payslips(run_id)])


@router.post("/runs/{run_id}/preview", response_model=PreviewOut)
def preview_run(
    run_id: int,
    payload: PayslipBatch,
    rollup: PayrollRollupService = Depends(get_rollup_service),
    caller: User = Depends(require_payroll),
):
    totals = rollup.preview(run_id, payload.items)
    return PreviewOut(
        employees=[
            PreviewLine(
                employee_id=int(employee_id),
                gross_pay=result.gross_pay,
                total_deductions=result.total_deductions,
                net_pay=result.net_pay,
                withholding_tax=result.withholding_tax,
                tax_status=result.tax.status.value,
                tax_bracket=result.tax.bracket,
            )
            for employee_id, result in totals.employees.items()
        ],
        gross_pay=totals.gross_pay,
        total_deductions=totals.total_deductions,
        total_net_pay=totals.total_net_pay,
        withholding_tax=totals.withholding_tax,
        employee_contributions=totals.employee_contributions,
        employer_contributions=totals.employer_contributions,
        untaxed_employees=[int(employee_id) for employee_id in totals.untaxed_employees],
    )


def _transition(rollup: PayrollRollupService, db: Session, run_id: int, target: RunStatus, reason=None):
    run = rollup.transition(run_id, target, reason)
    db.commit()
    db.refresh(run)
    return PayrollRunOut.model_validate(run)


@router.post("/runs/{run_id}/approve", response_model=PayrollRunOut)
def approve_run(
    run_id: int,
    db: Session = Depends(get_session),
    rollup: PayrollRollupService = Depends(get_rollup_service),
    caller: User = Depends(require_payroll),
):
    return _transition(rollup, db, run_id, RunStatus.APPROVED)


@router.post("/runs/{run_id}/pay", response_model=PayrollRunOut)
def pay_run(
    run_id: int,
    db: Session = Depends(get_session),
    rollup: PayrollRollupService = Depends(get_rollup_service),
    caller: User = Depends(require_payroll),
):
    return _transition(rollup, db, run_id, RunStatus.PAID)


@router.post("/runs/{run_id}/void", response_model=PayrollRunOut)
def void_run(
    run_id: int,
    payload: VoidRunRequest,
    db: Session = Depends(get_session),
    rollup: PayrollRollupService = Depends(get_rollup_service),
    caller: User = Depends(require_payroll),
):
    return _transition(rollup, db, run_id, RunStatus.VOIDED, payload.reason)


@payslip_router.get("/{payslip_id}", response_model=PayslipOut)
def get_payslip(
    payslip_id: int,
    rollup: PayrollRollupService = Depends(get_rollup_service),
    caller: User = Depends(require_caller),
):
    return PayslipOut.model_validate(rollup.get_payslip(payslip_id))
