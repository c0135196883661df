from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from .calculator import PayslipCalculator
from .models import PayslipRequest, PayslipResult


@dataclass
class PreviewTotals:
    employees: Dict[str, PayslipResult]
    gross_pay: float
    total_deductions: float
    total_net_pay: float
    employee_contributions: Dict[str, float]
    employer_contributions: Dict[str, float]
    withholding_tax: float
    untaxed_employees: List[str] = field(default_factory=list)


class PreviewWizard:
    def __init__(self, calculator: PayslipCalculator):
        self.calculator = calculator

    def preview(self, requests: List[PayslipRequest]) -> PreviewTotals:
        employee_results: Dict[str, PayslipResult] = {}
        employee_contributions: Dict[str, float] = {"sss": 0.0, "philhealth": 0.0, "hdmf": 0.0}
        employer_contributions: Dict[str, float] = {"sss": 0.0, "philhealth": 0.0, "hdmf": 0.0}
        total_gross = 0.0
        total_deductions = 0.0
        total_net = 0.0
        total_tax = 0.0
        untaxed: List[str] = []

        for request in requests:
            if request.employee_id in employee_results:
                raise ValueError(f"Employee {request.employee_id} is listed more than once")
            result = self.calculator.calculate_employee(request)
            employee_results[request.employee_id] = result
            total_gross += result.gross_pay
            total_deductions += result.total_deductions
            total_net += result.net_pay
            total_tax += result.withholding_tax
            for name in employee_contributions:
                contribution = getattr(result, name)
                employee_contributions[name] += contribution.employee
                employer_contributions[name] += contribution.employer
            if not result.tax.matched:
                untaxed.append(request.employee_id)

        return PreviewTotals(
            employees=employee_results,
            gross_pay=round(total_gross, 2),
            total_deductions=round(total_deductions, 2),
            total_net_pay=round(total_net, 2),
            employee_contributions={k: round(v, 2) for k, v in employee_contributions.items()},
            employer_contributions={k: round(v, 2) for k, v in employer_contributions.items()},
            withholding_tax=round(total_tax, 2),
            untaxed_employees=untaxed,
        )
