from .clock_event import ClockEvent
from .dtr import DTR
from .employee import Employee
from .pay_period import PayPeriod
from .payroll_run import PayrollRun
from .payslip import EmployeePayslip
from .timelog import Timelog
from .timesheet import Timesheet
from .user import User, UserSession

__all__ = [
    "User",
    "UserSession",
    "Timesheet",
    "DTR",
    "Timelog",
    "ClockEvent",
    "Employee",
    "PayPeriod",
    "PayrollRun",
    "EmployeePayslip",
]
