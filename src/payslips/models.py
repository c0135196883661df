from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


@dataclass
class EarningLine:
    category: str  # e.g. basic, overtime, night_diff
    hours: float
    rate: float

    @property
    def amount(self) -> float:
        return round(self.hours * self.rate, 2)


@dataclass
class AmountLine:
    """A named peso amount: an allowance, a loan amortization or another deduction."""

    name: str
    amount: float


@dataclass
class PayslipRequest:
    employee_id: str
    basic_pay: float = 0.0
    overtime_pay: float = 0.0
    night_diff_pay: float = 0.0
    holiday_pay: float = 0.0
    allowances: List[AmountLine] = field(default_factory=list)
    loans: List[AmountLine] = field(default_factory=list)
    other_deductions: List[AmountLine] = field(default_factory=list)
    absences: float = 0.0
    tardiness: float = 0.0
    # Statutory overrides; None means "look it up in the government tables"
    sss_ee: Optional[float] = None
    philhealth_ee: Optional[float] = None
    hdmf_ee: Optional[float] = None
    withholding_tax: Optional[float] = None


class TaxStatus(str, Enum):
    BRACKET = "bracket"
    NO_BRACKET = "no_bracket"
    OVERRIDE = "override"


@dataclass
class TaxOutcome:
    status: TaxStatus
    amount: float
    taxable_income: float
    bracket: Optional[int] = None

    @property
    def matched(self) -> bool:
        return self.status is not TaxStatus.NO_BRACKET


@dataclass
class Contribution:
    employee: float
    employer: float = 0.0


@dataclass
class ExplanationLine:
    code: str
    label: str
    amount: float
    details: Dict[str, float] = field(default_factory=dict)


@dataclass
class PayslipResult:
    employee_id: str
    basic_pay: float
    overtime_pay: float
    night_diff_pay: float
    holiday_pay: float
    allowances_total: float
    gross_pay: float
    sss: Contribution
    philhealth: Contribution
    hdmf: Contribution
    tax: TaxOutcome
    loans_total: float
    other_deductions_total: float
    absences: float
    tardiness: float
    total_deductions: float
    net_pay: float
    explanations: List[ExplanationLine] = field(default_factory=list)

    @property
    def withholding_tax(self) -> float:
        return self.tax.amount

    @property
    def taxable_income(self) -> float:
        return self.tax.taxable_income

    def statutory_employee_total(self) -> float:
        return round(self.sss.employee + self.philhealth.employee + self.hdmf.employee, 2)
