from __future__ import annotations

from typing import List

from .gov_tables import GovTable, GovTableRepository
from .models import (
    AmountLine,
    Contribution,
    ExplanationLine,
    PayslipRequest,
    PayslipResult,
    TaxOutcome,
    TaxStatus,
)


def _total(lines: List[AmountLine]) -> float:
    return round(sum(line.amount for line in lines), 2)


class PayslipCalculator:
    def __init__(self, gov_table_repo: GovTableRepository, table_version: str):
        self.gov_table_repo = gov_table_repo
        self.table_version = table_version
        self.gov_table: GovTable = gov_table_repo.load(table_version)

    def _sss(self, basis: float, override: float | None) -> Contribution:
        bracket = self.gov_table.sss_bracket(basis)
        employer = bracket.employer_contrib if bracket else 0.0
        if override is not None:
            return Contribution(employee=round(override, 2), employer=employer)
        if bracket is None:
            return Contribution(employee=0.0)
        return Contribution(employee=bracket.employee_contrib, employer=employer)

    def _philhealth(self, basis: float, override: float | None) -> Contribution:
        bracket = self.gov_table.philhealth_bracket(basis)
        if bracket is None:
            employee, employer = 0.0, 0.0
        else:
            share = round(basis * bracket.rate / 2, 2)
            employee = bracket.employee_contrib if bracket.employee_contrib is not None else share
            employer = bracket.employer_contrib if bracket.employer_contrib is not None else share
        if override is not None:
            employee = round(override, 2)
        return Contribution(employee=employee, employer=employer)

    def _hdmf(self, basis: float, override: float | None) -> Contribution:
        bracket = self.gov_table.hdmf_bracket(basis)
        if bracket is None:
            employee, employer = 0.0, 0.0
        else:
            capped = min(basis, bracket.reference)
            employee = round(capped * bracket.employee_rate, 2)
            employer = round(capped * bracket.employer_rate, 2)
        if override is not None:
            employee = round(override, 2)
        return Contribution(employee=employee, employer=employer)

    def _withholding_tax(self, taxable_income: float, override: float | None) -> TaxOutcome:
        taxable_income = round(taxable_income, 2)
        if override is not None:
            return TaxOutcome(status=TaxStatus.OVERRIDE, amount=round(override, 2), taxable_income=taxable_income)
        bracket = self.gov_table.tax_bracket(taxable_income)
        if bracket is None:
            return TaxOutcome(status=TaxStatus.NO_BRACKET, amount=0.0, taxable_income=taxable_income)
        amount = bracket.fixed_tax + (taxable_income - bracket.min) * bracket.rate_on_excess
        return TaxOutcome(
            status=TaxStatus.BRACKET,
            amount=round(amount, 2),
            taxable_income=taxable_income,
            bracket=bracket.bracket,
        )

    def calculate_employee(self, request: PayslipRequest) -> PayslipResult:
        explanations: List[ExplanationLine] = []
        allowances_total = _total(request.allowances)
        earnings = {
            "basic": request.basic_pay,
            "overtime": request.overtime_pay,
            "night_diff": request.night_diff_pay,
            "holiday": request.holiday_pay,
        }
        for code, amount in earnings.items():
            explanations.append(
                ExplanationLine(code=f"earning:{code}", label=f"{code.replace('_', ' ').title()} pay", amount=amount)
            )
        for allowance in request.allowances:
            explanations.append(ExplanationLine(code="allowance", label=allowance.name, amount=allowance.amount))
        gross_pay = round(sum(earnings.values()) + allowances_total, 2)

        sss = self._sss(gross_pay, request.sss_ee)
        philhealth = self._philhealth(gross_pay, request.philhealth_ee)
        hdmf = self._hdmf(gross_pay, request.hdmf_ee)
        for code, contribution in (("sss", sss), ("philhealth", philhealth), ("hdmf", hdmf)):
            explanations.append(
                ExplanationLine(
                    code=f"statutory:{code}",
                    label=f"{code.upper()} employee share",
                    amount=contribution.employee,
                    details={"basis": gross_pay, "employer": contribution.employer},
                )
            )

        taxable_income = gross_pay - sss.employee - philhealth.employee - hdmf.employee
        tax = self._withholding_tax(taxable_income, request.withholding_tax)
        explanations.append(
            ExplanationLine(
                code="withholding_tax",
                label="Withholding tax",
                amount=tax.amount,
                details={"taxable_income": tax.taxable_income, "bracket": float(tax.bracket or 0)},
            )
        )

        loans_total = _total(request.loans)
        other_deductions_total = _total(request.other_deductions)
        for line in request.loans + request.other_deductions:
            explanations.append(ExplanationLine(code="deduction", label=line.name, amount=line.amount))

        total_deductions = round(
            sss.employee
            + philhealth.employee
            + hdmf.employee
            + tax.amount
            + loans_total
            + other_deductions_total
            + request.absences
            + request.tardiness,
            2,
        )

        return PayslipResult(
            employee_id=request.employee_id,
            basic_pay=round(request.basic_pay, 2),
            overtime_pay=round(request.overtime_pay, 2),
            night_diff_pay=round(request.night_diff_pay, 2),
            holiday_pay=round(request.holiday_pay, 2),
            allowances_total=allowances_total,
            gross_pay=gross_pay,
            sss=sss,
            philhealth=philhealth,
            hdmf=hdmf,
            tax=tax,
            loans_total=loans_total,
            other_deductions_total=other_deductions_total,
            absences=round(request.absences, 2),
            tardiness=round(request.tardiness, 2),
            total_deductions=total_deductions,
            net_pay=round(gross_pay - total_deductions, 2),
            explanations=explanations,
        )
