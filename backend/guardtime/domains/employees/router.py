from datetime import date
from typing import Literal

from fastapi import APIRouter, Depends
from pydantic import ConfigDict, Field
from sqlalchemy.orm import Session

from guardtime.core.errors import ConflictError, NotFoundError
from guardtime.core.logging import get_logger
from guardtime.core.schemas import RequestModel
from guardtime.core.security import require_caller, require_caller_with_role
from guardtime.db.session import get_session
from guardtime.models import Employee, EmployeePayslip, User

router = APIRouter(prefix="/employees", tags=["employees"])
logger = get_logger(__name__)


class EmployeeBase(RequestModel):
    employee_no: str = Field(min_length=1, max_length=20)
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    middle_name: str | None = None
    email: str | None = None
    classification: Literal["GUARD", "ADMIN"] = "GUARD"
    employment_status: Literal["ACTIVE", "INACTIVE", "TERMINATED"] = "ACTIVE"
    base_salary: float = Field(default=0, ge=0)
    hourly_rate: float = Field(default=0, ge=0)
    daily_rate: float = Field(default=0, ge=0)
    hire_date: date | None = None


class EmployeeCreate(EmployeeBase):
    pass


class EmployeeOut(EmployeeBase):
    model_config = ConfigDict(extra="ignore")

    id: int
    full_name: str


def _to_out(row: Employee) -> EmployeeOut:
    return EmployeeOut(
        id=row.id,
        employee_no=row.employee_no,
        first_name=row.first_name,
        last_name=row.last_name,
        middle_name=row.middle_name,
        email=row.email,
        classification=row.classification,
        employment_status=row.employment_status,
        base_salary=float(row.base_salary or 0),
        hourly_rate=float(row.hourly_rate or 0),
        daily_rate=float(row.daily_rate or 0),
        hire_date=row.hire_date,
        full_name=row.full_name,
    )


@router.get("", response_model=list[EmployeeOut])
def list_employees(db: Session = Depends(get_session), caller: User = Depends(require_caller)):
    rows = db.query(Employee).order_by(Employee.last_name.asc(), Employee.id.asc()).all()
    return [_to_out(r) for r in rows]


@router.post("", response_model=EmployeeOut, status_code=201)
def create_employee(
    payload: EmployeeCreate,
    db: Session = Depends(get_session),
    caller: User = Depends(require_caller_with_role("payroll")),
):
    employee_no = payload.employee_no.strip()
    if db.query(Employee).filter(Employee.employee_no == employee_no).one_or_none():
        raise ConflictError(f"Employee number {employee_no} is already in use")

    row = Employee(**payload.model_dump(exclude={"employee_no"}), employee_no=employee_no)
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info("employee_created", employee_id=row.id, employee_no=employee_no)
    return _to_out(row)


@router.delete("/{employee_id}", status_code=204)
def delete_employee(
    employee_id: int,
    db: Session = Depends(get_session),
    caller: User = Depends(require_caller_with_role("payroll")),
):
    row = db.query(Employee).filter(Employee.id == employee_id).one_or_none()
    if not row:
        raise NotFoundError("Employee", employee_id)
    if db.query(EmployeePayslip).filter(EmployeePayslip.employee_id == employee_id).first():
        raise ConflictError("Employee has payslips and cannot be deleted")
    db.delete(row)
    db.commit()
    return None
