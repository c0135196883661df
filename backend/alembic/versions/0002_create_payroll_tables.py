"""create employees, pay periods, payroll runs and payslips

Revision ID: 0002
Revises: 0001
Create Date: 2025-01-13
"""

from __future__ import annotations

import sqlalchemy as sa

from alembic import op

revision = "0002"
down_revision = "0001"
branch_labels = None
depends_on = None

MONEY = sa.Numeric(scale=2)


def _money(name: str) -> sa.Column:
    return sa.Column(name, MONEY, nullable=False, server_default="0")


def upgrade() -> None:
    op.create_table(
        "employees",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("employee_no", sa.String(length=20), nullable=False),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("middle_name", sa.String(length=100), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("classification", sa.String(length=20), nullable=False, server_default="GUARD"),
        sa.Column("employment_status", sa.String(length=20), nullable=False, server_default="ACTIVE"),
        _money("base_salary"),
        _money("hourly_rate"),
        _money("daily_rate"),
        sa.Column("hire_date", sa.Date(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_employees_id"), "employees", ["id"], unique=False)
    op.create_index(op.f("ix_employees_employee_no"), "employees", ["employee_no"], unique=True)

    op.create_table(
        "pay_periods",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("code", sa.String(length=20), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="OPEN"),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("code"),
    )
    op.create_index(op.f("ix_pay_periods_id"), "pay_periods", ["id"], unique=False)

    op.create_table(
        "payroll_runs",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("pay_period_id", sa.Integer(), nullable=False),
        sa.Column("payroll_type", sa.String(length=20), nullable=False, server_default="REGULAR"),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="DRAFT"),
        sa.Column("created_by", sa.String(length=255), nullable=True),
        sa.Column("void_reason", sa.String(length=255), nullable=True),
        sa.Column("voided_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["pay_period_id"], ["pay_periods.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("pay_period_id", "payroll_type", name="uq_payroll_runs_period_type"),
    )
    op.create_index(op.f("ix_payroll_runs_id"), "payroll_runs", ["id"], unique=False)

    op.create_table(
        "employee_payslips",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("payroll_run_id", sa.Integer(), nullable=False),
        sa.Column("employee_id", sa.Integer(), nullable=False),
        sa.Column("timesheet_id", sa.Integer(), nullable=True),
        _money("basic_pay"),
        _money("overtime_pay"),
        _money("night_diff_pay"),
        _money("holiday_pay"),
        _money("allowances_total"),
        sa.Column("allowances_detail", sa.JSON(), nullable=False),
        _money("absences_amount"),
        _money("tardiness_amount"),
        _money("loans_total"),
        sa.Column("loans_detail", sa.JSON(), nullable=False),
        _money("other_deductions_total"),
        sa.Column("other_deductions_detail", sa.JSON(), nullable=False),
        _money("sss_ee"),
        _money("sss_er"),
        _money("philhealth_ee"),
        _money("philhealth_er"),
        _money("hdmf_ee"),
        _money("hdmf_er"),
        _money("taxable_income"),
        _money("withholding_tax"),
        sa.Column("tax_status", sa.String(length=20), nullable=False, server_default="bracket"),
        sa.Column("tax_bracket", sa.Integer(), nullable=True),
        _money("gross_pay"),
        _money("total_deductions"),
        _money("net_pay"),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="DRAFT"),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["payroll_run_id"], ["payroll_runs.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["employee_id"], ["employees.id"]),
        sa.ForeignKeyConstraint(["timesheet_id"], ["timesheets.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("payroll_run_id", "employee_id", name="uq_payslips_run_employee"),
    )
    op.create_index(op.f("ix_employee_payslips_id"), "employee_payslips", ["id"], unique=False)
    op.create_index(
        op.f("ix_employee_payslips_payroll_run_id"), "employee_payslips", ["payroll_run_id"], unique=False
    )
    op.create_index(op.f("ix_employee_payslips_employee_id"), "employee_payslips", ["employee_id"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_employee_payslips_employee_id"), table_name="employee_payslips")
    op.drop_index(op.f("ix_employee_payslips_payroll_run_id"), table_name="employee_payslips")
    op.drop_index(op.f("ix_employee_payslips_id"), table_name="employee_payslips")
    op.drop_table("employee_payslips")
    op.drop_index(op.f("ix_payroll_runs_id"), table_name="payroll_runs")
    op.drop_table("payroll_runs")
    op.drop_index(op.f("ix_pay_periods_id"), table_name="pay_periods")
    op.drop_table("pay_periods")
    op.drop_index(op.f("ix_employees_employee_no"), table_name="employees")
    op.drop_index(op.f("ix_employees_id"), table_name="employees")
    op.drop_table("employees")
