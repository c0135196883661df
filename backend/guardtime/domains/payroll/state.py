"""Payroll run status transitions."""

from __future__ import annotations

from enum import Enum

from guardtime.core.errors import ConflictError


class RunStatus(str, Enum):
    DRAFT = "DRAFT"
    APPROVED = "APPROVED"
    PAID = "PAID"
    VOIDED = "VOIDED"


class PayrollRunStateMachine:
    """Allowed transitions:

    - DRAFT -> APPROVED
    - APPROVED -> PAID
    - DRAFT, APPROVED -> VOIDED
    """

    VALID_TRANSITIONS: dict[str, list[str]] = {
        RunStatus.DRAFT: [RunStatus.APPROVED, RunStatus.VOIDED],
        RunStatus.APPROVED: [RunStatus.PAID, RunStatus.VOIDED],
        RunStatus.PAID: [],
        RunStatus.VOIDED: [],
    }

    # Payslips are only (re)generated while the run is a draft
    PAYSLIPS_MUTABLE = {RunStatus.DRAFT}

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        return to_status in cls.VALID_TRANSITIONS.get(from_status, [])

    @classmethod
    def validate_transition(cls, from_status: str, to_status: str) -> None:
        if not cls.can_transition(from_status, to_status):
            raise ConflictError(f"Cannot move payroll run from {from_status} to {to_status}")

    @classmethod
    def can_modify_payslips(cls, status: str) -> bool:
        return status in cls.PAYSLIPS_MUTABLE
