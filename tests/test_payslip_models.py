from payslips.models import Contribution, EarningLine, PayslipResult, TaxOutcome, TaxStatus


def test_earning_line_amount_rounds_currency():
    line = EarningLine("basic", hours=8, rate=76.92)

    assert line.amount == 615.36


def test_tax_outcome_matched_flags_missing_bracket():
    assert TaxOutcome(TaxStatus.BRACKET, 0.0, 1000.0, bracket=1).matched
    assert TaxOutcome(TaxStatus.OVERRIDE, 500.0, 1000.0).matched
    assert not TaxOutcome(TaxStatus.NO_BRACKET, 0.0, -10.0).matched


def test_statutory_employee_total_rounds_sum():
    result = PayslipResult(
        employee_id="g-1",
        basic_pay=1000.0,
        overtime_pay=0.0,
        night_diff_pay=0.0,
        holiday_pay=0.0,
        allowances_total=0.0,
        gross_pay=1000.0,
        sss=Contribution(employee=200.123),
        philhealth=Contribution(employee=250.0),
        hdmf=Contribution(employee=10.555),
        tax=TaxOutcome(TaxStatus.NO_BRACKET, 0.0, 539.32),
        loans_total=0.0,
        other_deductions_total=0.0,
        absences=0.0,
        tardiness=0.0,
        total_deductions=460.68,
        net_pay=539.32,
    )

    assert result.statutory_employee_total() == 460.68
    assert result.withholding_tax == 0.0
    assert result.taxable_income == 539.32
