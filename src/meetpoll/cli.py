"""Command-line interface for the meetpoll date recommender."""

import argparse
import json
import logging
import random
import sys
from datetime import date, timedelta
from pathlib import Path
from typing import Optional

from meetpoll.domain.models import Participant, ScheduleRequest, ScheduleResult, Settings
from meetpoll.output.pdf_generator import PDFGenerator
from meetpoll.output.text_report import TextReportGenerator
from meetpoll.scheduling.scheduler import Scheduler
from meetpoll.validation.validator import RequestValidator, ScheduleValidator

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_UNREADABLE = 2


def positive_int(value: str) -> int:
    """argparse type for integers of at least 1."""
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def non_negative_int(value: str) -> int:
    """argparse type for integers of at least 0."""
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must not be negative, got {number}")
    return number


def setup_logging(verbose: bool = False) -> None:
    """Configure root logging for CLI runs."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


def create_sample_participants(
    count: int = 8,
    schedule_dates: Optional[list[date]] = None,
    seed: int = 0,
) -> list[Participant]:
    """Create sample participants for demos.

    Args:
        count: Number of participants to create.
        schedule_dates: Candidate dates. If None, uses the next 14 days.
        seed: Seed for the availability generator.

    Raises:
        ValueError: If schedule_dates is empty.
    """
    if schedule_dates is None:
        start = date.today()
        schedule_dates = [start + timedelta(days=i) for i in range(14)]
    if not schedule_dates:
        raise ValueError("At least one candidate date is required")

    names = [
        "Alice", "Bob", "Carol", "David", "Eve", "Frank", "Grace", "Henry",
        "Ivy", "Jack", "Kate", "Leo", "Mia", "Noah", "Olivia", "Paul",
        "Quinn", "Rose", "Sam", "Tina", "Uma", "Victor", "Wendy", "Xavier",
    ]
    rng = random.Random(seed)
    participants = []

    for i in range(count):
        name = names[i % len(names)]
        if i >= len(names):
            name = f"{name}{i // len(names) + 1}"

        # Weekends are more popular, everyone picks at least one date
        available = [
            d.isoformat()
            for d in schedule_dates
            if rng.random() < (0.6 if d.weekday() >= 5 else 0.3)
        ]
        if not available:
            available = [rng.choice(schedule_dates).isoformat()]

        participants.append(
            Participant(id=f"P{i + 1:03d}", name=name, available_dates=available)
        )

    return participants


def load_request(path: str) -> ScheduleRequest:
    """Load a schedule request from a JSON file.

    Raises:
        ValueError: If the file cannot be read or has the wrong structure.
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as e:
        raise ValueError(f"Cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ValueError(f"{path} is not valid JSON: {e}") from e
    return ScheduleRequest.from_dict(data)


def result_to_dict(result: ScheduleResult) -> dict:
    """Serialize a schedule result for JSON output."""
    return {
        "finalDates": result.final_dates,
        "coreDates": result.core_dates,
        "assignments": result.assignments,
        "warnings": result.warnings,
    }


def print_summary(result: ScheduleResult, request: ScheduleRequest) -> None:
    """Print a short human-readable summary of a result."""
    names = {p.id: p.name for p in request.participants}

    if result.final_dates:
        print(f"\nRecommended dates ({len(result.final_dates)}):")
        for day in sorted(result.final_dates):
            marker = " [core]" if result.is_core_date(day) else ""
            attendees = ", ".join(names[pid] for pid in result.get_attendees(day))
            print(f"  {day}{marker}: {attendees}")
    else:
        print("\nNo dates could be recommended.")

    if result.warnings:
        print(f"\nWarnings ({len(result.warnings)}):")
        for warning in result.warnings:
            print(f"  - {warning}")


def run_schedule(
    request: ScheduleRequest,
    pdf_path: Optional[str] = None,
    text_path: Optional[str] = None,
    as_json: bool = False,
) -> int:
    """Validate, schedule and report a request.

    Returns:
        Process exit code.
    """
    validation = RequestValidator().validate(request)
    for warning in validation.warnings:
        logger.warning(warning)
    if not validation.is_valid:
        print(f"Input validation: FAILED ({len(validation.errors)} errors)")
        for error in validation.errors[:10]:
            print(f"    - {error}")
        if len(validation.errors) > 10:
            print(f"    ... and {len(validation.errors) - 10} more errors")
        return EXIT_INVALID

    scheduler = Scheduler()
    result, stats = scheduler.generate_schedule_with_stats(
        request.participants, request.settings
    )
    logger.info(
        "Selected %d dates, average attendance %.1f%%",
        stats.total_meetings,
        stats.avg_attendance_rate,
    )

    check = ScheduleValidator().validate(result, request)
    if not check.is_valid:
        for error in check.errors:
            logger.error("Result check failed: %s", error)

    if as_json:
        print(json.dumps(result_to_dict(result), indent=2, ensure_ascii=False))
    else:
        print_summary(result, request)

    if text_path:
        TextReportGenerator().generate(result, request, text_path)
        logger.info("Text report written to %s", text_path)

    if pdf_path:
        PDFGenerator().generate(result, request, pdf_path)
        logger.info("PDF report written to %s", pdf_path)

    return EXIT_OK


def run_demo(
    participant_count: int = 8,
    days: int = 14,
    seed: int = 0,
    pdf_path: Optional[str] = None,
) -> int:
    """Run a demo with generated participants."""
    print(f"Recommending dates for {participant_count} participants over {days} days...")

    start = date.today()
    schedule_dates = [start + timedelta(days=i) for i in range(days)]
    participants = create_sample_participants(participant_count, schedule_dates, seed)

    request = ScheduleRequest(
        participants=participants,
        settings=Settings(
            min_dates_per_person=1,
            min_meeting_dates=3,
            min_meetings_per_person=1,
            min_participants_per_meeting=max(1, participant_count // 3),
        ),
    )
    return run_schedule(request, pdf_path=pdf_path)


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        description="meetpoll - Meeting date recommender",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s schedule votes.json              Recommend dates for a poll
  %(prog)s schedule votes.json --json       Print the result as JSON
  %(prog)s schedule votes.json --pdf r.pdf  Also write a PDF report

  %(prog)s demo                             Run demo with 8 participants
  %(prog)s demo --count 20 --days 30        Larger demo
        """,
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    schedule_parser = subparsers.add_parser(
        "schedule",
        help="Recommend dates for participants loaded from a JSON file",
    )
    schedule_parser.add_argument("input", type=str, help="Input JSON file path")
    schedule_parser.add_argument(
        "--pdf",
        type=str,
        help="Output PDF file path",
    )
    schedule_parser.add_argument(
        "--text",
        type=str,
        help="Output text report file path",
    )
    schedule_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON",
    )

    demo_parser = subparsers.add_parser("demo", help="Run demo with generated participants")
    demo_parser.add_argument(
        "--count", "-c",
        type=non_negative_int,
        default=8,
        help="Number of participants to generate (default: 8)",
    )
    demo_parser.add_argument(
        "--days", "-d",
        type=positive_int,
        default=14,
        help="Number of candidate days (default: 14)",
    )
    demo_parser.add_argument(
        "--seed", "-s",
        type=int,
        default=0,
        help="Random seed for generated availability (default: 0)",
    )
    demo_parser.add_argument(
        "--pdf",
        type=str,
        help="Output PDF file path",
    )

    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    if args.command == "schedule":
        try:
            request = load_request(args.input)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return EXIT_UNREADABLE
        return run_schedule(request, args.pdf, args.text, args.json)
    elif args.command == "demo":
        return run_demo(args.count, args.days, args.seed, args.pdf)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
