"""Command-line interface for the custody planner."""

import argparse
import json
import logging
import sys
from datetime import date
from typing import Optional

from custodyplanner.domain.models import (
    CustodySchedule,
    Party,
    PartyNames,
    UnavailabilityRequest,
)
from custodyplanner.output.pdf_generator import PDFGenerator
from custodyplanner.output.text_report import TextReportGenerator
from custodyplanner.scheduling.cpsat_rebalancer import CPSATRebalancer, RebalanceConfig
from custodyplanner.scheduling.periods import PeriodAnalyzer
from custodyplanner.scheduling.scheduler import CustodyScheduler
from custodyplanner.validation.validator import ConsecutiveDayValidator

PARTY_CHOICES = {"a": Party.PERSON_A, "b": Party.PERSON_B}


def parse_date(value: str) -> date:
    """argparse type for ISO dates."""
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date: {value!r} (expected YYYY-MM-DD)")


def build_schedule(
    scheduler: CustodyScheduler,
    start: date,
    initial: str,
    days: int,
) -> CustodySchedule:
    return scheduler.create_schedule(start, PARTY_CHOICES[initial], days)


def print_periods(schedule: CustodySchedule, names: PartyNames, day_range: int) -> None:
    """Print custody periods for the leading day_range entries."""
    for period in PeriodAnalyzer().get_periods(schedule, day_range):
        print(
            f"  {names.name_for(period.person_id):<12} "
            f"{period.start_date} - {period.end_date} ({period.day_count})"
        )


def run_generate(
    start: date,
    initial: str,
    days: int,
    names: PartyNames,
    output_path: Optional[str] = None,
    report_path: Optional[str] = None,
) -> None:
    """Generate a baseline calendar and print a summary."""
    scheduler = CustodyScheduler(names=names)
    schedule = build_schedule(scheduler, start, initial, days)

    print(f"Generated {len(schedule)} days from {schedule.start_date}")
    print(f"  Initial party: {names.name_for(schedule.initial_party)}")

    validation = ConsecutiveDayValidator(scheduler.policy).validate_schedule(schedule, names)
    if validation.is_valid:
        print("  Validation: PASSED")
    else:
        print(f"  Validation: FAILED ({len(validation.violations)} violations)")
        for violation in validation.violations[:5]:
            print(f"    - {violation}")

    print("\nFirst periods:")
    print_periods(schedule, names, min(days, 15))

    if report_path:
        TextReportGenerator().generate(schedule, report_path, names, days)
        print(f"\nText report written to {report_path}")

    if output_path:
        print(f"\nGenerating PDF: {output_path}")
        PDFGenerator().generate(schedule, output_path, names)
        print("  PDF created successfully!")


def run_unavailable(
    start: date,
    initial: str,
    days: int,
    party: str,
    dates: list[date],
    names: PartyNames,
    as_json: bool = False,
) -> None:
    """Apply an unavailability request to a fresh baseline and print the result."""
    scheduler = CustodyScheduler(names=names)
    schedule = build_schedule(scheduler, start, initial, days)
    request = UnavailabilityRequest(
        person_id=PARTY_CHOICES[party],
        dates=dates,
        reason="Marked unavailable from CLI",
    )

    for problem in scheduler.check_request(schedule, request):
        print(f"Note: {problem}", file=sys.stderr)

    updated, adjustment = scheduler.apply_unavailability(schedule, request)

    if as_json:
        print(json.dumps(adjustment.to_dict(), indent=2))
        return

    person = names.name_for(request.person_id)
    if not adjustment.conflict_dates:
        print(f"{person} marked unavailable for {len(request.dates)} date(s). No schedule conflicts.")
        return

    print(
        f"{person} marked unavailable for {len(request.dates)} date(s). "
        f"Schedule adjusted with {adjustment.handoff_count} "
        f"handoff{'s' if adjustment.handoff_count != 1 else ''} "
        f"({adjustment.strategy})."
    )
    for day, new_party in sorted(adjustment.proposed_assignments.items()):
        old_party = adjustment.original_assignments[day]
        print(f"  {day}: {names.name_for(old_party)} -> {names.name_for(new_party)}")
    for warning in adjustment.warnings:
        print(f"  Warning: {warning}")

    window_end = max(adjustment.conflict_dates)
    print("\nPeriods after adjustment:")
    print_periods(updated, names, (window_end - start).days + 8)


def run_periods(
    start: date,
    initial: str,
    days: int,
    names: PartyNames,
    day_range: int,
) -> None:
    """Print custody periods and statistics for a baseline calendar."""
    scheduler = CustodyScheduler(names=names)
    schedule = build_schedule(scheduler, start, initial, days)
    stats = PeriodAnalyzer().get_stats(schedule, day_range, as_of=schedule.end_date)

    print(f"Periods in first {day_range} days:")
    print_periods(schedule, names, day_range)
    print(f"\nTotal handoffs: {stats.total_handoffs}")
    print(f"Average period length: {stats.average_period_length:.1f}")
    for party in Party:
        print(
            f"  {names.name_for(party)}: avg block {stats.average_block_length[party]}, "
            f"year-to-date {stats.split_percent[party]}%"
        )
    print("\nHandoffs per month:")
    for month, count in stats.monthly_handoffs.items():
        print(f"  {month}: {count}")


def run_rebalance(
    start: date,
    initial: str,
    days: int,
    party: str,
    dates: list[date],
    names: PartyNames,
    time_limit: float,
) -> None:
    """Rebalance around unavailable dates with CP-SAT."""
    scheduler = CustodyScheduler(names=names)
    schedule = build_schedule(scheduler, start, initial, days)
    unavailable = {day: PARTY_CHOICES[party] for day in dates}

    rebalancer = CPSATRebalancer(
        scheduler.policy, RebalanceConfig(time_limit_seconds=time_limit)
    )
    result = rebalancer.rebalance(schedule, unavailable)

    print(f"Solver status: {result.status} ({result.solve_time_seconds:.2f}s)")
    if not result.is_feasible:
        print("  No assignment satisfies the constraints.")
        return

    print(f"  Changes: {result.changes_count}")
    print(f"  Handoffs in window: {result.handoff_count}")
    for day, new_party in sorted(result.proposed_assignments.items()):
        print(f"  {day}: -> {names.name_for(new_party)}")

    updated = scheduler.apply_rebalance(schedule, result, unavailable)
    print("\nPeriods after rebalance:")
    print_periods(updated, names, (max(dates) - start).days + 8)


def add_schedule_arguments(parser: argparse.ArgumentParser) -> None:
    """Arguments shared by every subcommand that builds a baseline."""
    parser.add_argument(
        "--start", "-s",
        type=parse_date,
        default=date.today(),
        help="First date of the schedule (default: today)",
    )
    parser.add_argument(
        "--initial", "-i",
        type=str,
        default="a",
        choices=sorted(PARTY_CHOICES),
        help="Party holding custody on the start date (default: a)",
    )
    parser.add_argument(
        "--days", "-d",
        type=int,
        default=90,
        help="Number of days to generate (default: 90)",
    )
    parser.add_argument(
        "--names", "-n",
        nargs=2,
        metavar=("NAME_A", "NAME_B"),
        help="Display names for the two parties",
    )


def add_request_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--party", "-p",
        type=str,
        required=True,
        choices=sorted(PARTY_CHOICES),
        help="Party who is unavailable",
    )
    parser.add_argument(
        "--dates",
        type=parse_date,
        nargs="+",
        required=True,
        help="Unavailable dates (YYYY-MM-DD)",
    )


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        description="Custody Planner - rotating custody calendar tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s generate --start 2024-01-01             Generate a 90-day 3-on/3-off calendar
  %(prog)s generate --output custody.pdf           Render the calendar as a PDF
  %(prog)s unavailable -s 2024-01-01 -p a --dates 2024-01-03
                                                   Resolve an unavailability request
  %(prog)s periods --range 60                      Show periods and statistics
  %(prog)s rebalance -s 2024-01-01 -p a --dates 2024-01-03 2024-01-04
                                                   Rebalance with CP-SAT
        """,
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    generate_parser = subparsers.add_parser("generate", help="Generate a baseline calendar")
    add_schedule_arguments(generate_parser)
    generate_parser.add_argument(
        "--output", "-o",
        type=str,
        help="Output PDF file path",
    )
    generate_parser.add_argument(
        "--report", "-r",
        type=str,
        help="Output text report path",
    )

    unavailable_parser = subparsers.add_parser(
        "unavailable",
        help="Apply an unavailability request to a baseline calendar",
    )
    add_schedule_arguments(unavailable_parser)
    add_request_arguments(unavailable_parser)
    unavailable_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the adjustment as JSON",
    )

    periods_parser = subparsers.add_parser("periods", help="Show custody periods and statistics")
    add_schedule_arguments(periods_parser)
    periods_parser.add_argument(
        "--range",
        type=int,
        default=30,
        help="Number of leading days to analyse (default: 30)",
    )

    rebalance_parser = subparsers.add_parser(
        "rebalance",
        help="Rebalance around unavailable dates with CP-SAT",
    )
    add_schedule_arguments(rebalance_parser)
    add_request_arguments(rebalance_parser)
    rebalance_parser.add_argument(
        "--time-limit", "-t",
        type=float,
        default=10.0,
        help="CP-SAT solver time limit in seconds (default: 10)",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 1

    if args.days < 0:
        print("error: --days must not be negative", file=sys.stderr)
        return 2

    names = PartyNames(*args.names) if args.names else PartyNames()

    if args.command == "generate":
        run_generate(args.start, args.initial, args.days, names, args.output, args.report)
    elif args.command == "unavailable":
        run_unavailable(
            args.start, args.initial, args.days, args.party, args.dates, names, args.json
        )
    elif args.command == "periods":
        run_periods(args.start, args.initial, args.days, names, args.range)
    elif args.command == "rebalance":
        run_rebalance(
            args.start, args.initial, args.days, args.party, args.dates, names,
            args.time_limit,
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
