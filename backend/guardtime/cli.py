from __future__ import annotations

import argparse
from datetime import datetime
from typing import get_args

from guardtime.core.config import settings
from guardtime.core.errors import GuardtimeError, ValidationError
from guardtime.core.logging import configure_logging, get_logger
from guardtime.core.schemas import Role
from guardtime.db.session import SessionLocal, session_scope
from guardtime.domains.timekeeping.hours import ShiftHoursRule
from guardtime.domains.timekeeping.recalculation import RecalculationService
from guardtime.domains.users.router import create_user
from guardtime.models import Timesheet
from guardtime.seed.seed_data import seed
from payslips.gov_tables import GovTableRepository

SESSION_FACTORY = SessionLocal
logger = get_logger(__name__)


def cmd_create_user(args: argparse.Namespace) -> int:
    with session_scope(SESSION_FACTORY) as db:
        user = create_user(db, args.email, args.password, args.role)
        print(f"Created user {user.email} ({user.role})")
    return 0


def cmd_seed(args: argparse.Namespace) -> int:
    with session_scope(SESSION_FACTORY) as db:
        seed(db)
    print("Seeded demo data")
    return 0


def cmd_recalculate(args: argparse.Namespace) -> int:
    with session_scope(SESSION_FACTORY) as db:
        recalc = RecalculationService(db)
        if args.timesheet is not None:
            ids = [args.timesheet]
        else:
            ids = [row.id for row in db.query(Timesheet.id).order_by(Timesheet.id).all()]
        for timesheet_id in ids:
            timesheet = recalc.recalculate_timesheet(timesheet_id)
            print(
                f"{timesheet.id} {timesheet.employee_name}: regular={timesheet.regular_hours:g} "
                f"overtime={timesheet.overtime_hours:g} night_diff={timesheet.night_differential:g}"
            )
    logger.info("timesheets_recalculated", count=len(ids))
    return 0


def cmd_verify(args: argparse.Namespace) -> int:
    with session_scope(SESSION_FACTORY) as db:
        problems = RecalculationService(db).find_inconsistent_timesheets()
        for problem in problems:
            print(
                f"{problem.timesheet_id}: stored regular={problem.stored.regular_hours:g} "
                f"overtime={problem.stored.overtime_hours:g} night_diff={problem.stored.night_differential:g}; "
                f"expected regular={problem.expected.regular_hours:g} "
                f"overtime={problem.expected.overtime_hours:g} night_diff={problem.expected.night_differential:g}"
            )
    if problems:
        return 1
    print("All timesheets consistent")
    return 0


def _timestamp(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise ValidationError(f"Invalid timestamp: {value}") from None


def cmd_compute_hours(args: argparse.Namespace) -> int:
    rule = ShiftHoursRule.from_settings(settings)
    if args.mode:
        rule.night_diff_mode = args.mode
    hours = rule.classify(_timestamp(args.time_in), _timestamp(args.time_out))
    print(
        f"regular={hours.regular_hours:g} overtime={hours.overtime_hours:g} "
        f"night_diff={hours.night_differential:g}"
    )
    return 0


def cmd_gov_tables(args: argparse.Namespace) -> int:
    repo = GovTableRepository(settings.gov_tables_path) if settings.gov_tables_path else GovTableRepository()
    for version in repo.available_versions():
        table = repo.load(version)
        marker = "*" if version == settings.gov_table_version else " "
        print(f"{marker} {version} effective {table.effective_from} ({len(table.bir)} tax brackets)")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Guardtime maintenance CLI")
    sub = parser.add_subparsers(dest="command", required=True)

    user = sub.add_parser("create-user", help="Create an API user")
    user.add_argument("email")
    user.add_argument("password")
    user.add_argument("--role", choices=get_args(Role), default="viewer")
    user.set_defaults(func=cmd_create_user)

    seed_cmd = sub.add_parser("seed", help="Load demo data")
    seed_cmd.set_defaults(func=cmd_seed)

    recalculate = sub.add_parser("recalculate", help="Recompute DTR hours and timesheet totals from timelogs")
    recalculate.add_argument("--timesheet", type=int, help="Only this timesheet id")
    recalculate.set_defaults(func=cmd_recalculate)

    verify = sub.add_parser("verify", help="Report timesheets whose totals differ from their DTRs")
    verify.set_defaults(func=cmd_verify)

    compute = sub.add_parser("compute-hours", help="Classify one shift without touching the database")
    compute.add_argument("time_in", help="ISO timestamp, e.g. 2025-01-02T22:00")
    compute.add_argument("time_out")
    compute.add_argument("--mode", choices=["flat", "overlap"])
    compute.set_defaults(func=cmd_compute_hours)

    tables = sub.add_parser("gov-tables", help="List government contribution table versions")
    tables.set_defaults(func=cmd_gov_tables)

    return parser


def main(argv: list[str] | None = None) -> int:
    configure_logging(settings.log_level, json_output=False, to_stderr=True)
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return args.func(args)
    except GuardtimeError as exc:
        print(f"error: {exc.message}")
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
