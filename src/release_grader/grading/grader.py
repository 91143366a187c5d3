"""Late-penalty grade calculation for project releases."""

import json
import math
from dataclasses import asdict, dataclass
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from ..config.models import GradingConfig
from ..errors import DateParseError
from ..utils.logging import get_logger, log_group

logger = get_logger(__name__)

FULL_GRADE = 100
WEEKLY_PENALTY = 10
DAYS_PER_WEEK = 7.0


@dataclass(frozen=True)
class GradeResult:
    """Result of grading a release against its deadline."""

    created: str
    deadline: str
    late: int
    grade: int

    @property
    def on_time(self) -> bool:
        return self.late == 0

    def to_dict(self) -> dict[str, str | int]:
        return asdict(self)


def format_datetime(value: datetime) -> str:
    """Format a datetime for humans, e.g. ``February 16, 2020, 9:00 PM PST``."""
    hour = value.hour % 12 or 12
    meridiem = "AM" if value.hour < 12 else "PM"
    return (
        f"{value:%B} {value.day}, {value.year}, "
        f"{hour}:{value.minute:02d} {meridiem} {value.tzname()}"
    )


def parse_timestamp(value: str, zone: ZoneInfo) -> datetime:
    """Parse an ISO-8601 timestamp into ``zone``.

    Timestamps without an offset are taken as local time in ``zone``.

    Raises:
        DateParseError: If the value is not ISO-8601 or is out of range
    """
    if not isinstance(value, str) or not value.strip():
        raise DateParseError(str(value), "The timestamp is empty.")
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError as e:
        raise DateParseError(value, str(e)) from e

    try:
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=zone)
        else:
            parsed = parsed.astimezone(zone)
        # Lateness is measured between UTC instants
        parsed.astimezone(timezone.utc)
    except OverflowError as e:
        raise DateParseError(value, "The time is out of range.") from e
    return parsed


def weeks_late(created: datetime, deadline: datetime) -> int:
    """Count the 7-day windows touched after the deadline.

    A release exactly at the deadline is on time. Anything later counts
    one week for the first window and one more per full week after it.
    Days are measured in local wall-clock time, so a week spanning a
    daylight saving change is still seven days.
    """
    # Aware datetimes sharing a zone compare by wall time, so compare instants
    if created.astimezone(timezone.utc) <= deadline.astimezone(timezone.utc):
        return 0

    created = created.astimezone(deadline.tzinfo)
    elapsed = created.replace(tzinfo=None) - deadline.replace(tzinfo=None)
    days = elapsed / timedelta(days=1)
    # Wall time can run backwards across a fall-back transition
    return max(1, 1 + math.floor(days / DAYS_PER_WEEK))


class GradeCalculator:
    """Computes lateness-adjusted grades from the configured deadlines."""

    def __init__(self, config: GradingConfig | None = None):
        """Initialize the calculator.

        Args:
            config: Deadline tables and reference time zone
        """
        self.config = config or GradingConfig()

    def calculate(self, created: str, project: int, submission_type: str) -> GradeResult:
        """Grade a release.

        Args:
            created: ISO-8601 release creation timestamp
            project: Project number
            submission_type: Submission type, e.g. ``Functionality``

        Returns:
            GradeResult with the late week count and grade

        Raises:
            DateParseError: If ``created`` is not ISO-8601
            ConfigurationError: If no deadline exists for the type and project
        """
        kind = submission_type.lower()
        zone = self.config.zone

        with log_group("Calculating grade..."):
            logger.info(f"Release created: {created}")

            created_at = parse_timestamp(created, zone)
            created_text = format_datetime(created_at)
            logger.info(f"Parsed created date: {created_text}")

            deadline = self.config.deadline_for(kind, project)
            deadline_text = format_datetime(deadline)
            logger.info(f"Parsed {kind} deadline: {deadline_text}")

            late = weeks_late(created_at, deadline)
            if late == 0:
                logger.info("Release created before deadline!")
            else:
                logger.info(f"Release is within {late} week(s) late.")

            grade = FULL_GRADE - WEEKLY_PENALTY * late
            logger.info(
                f"Project {project} {kind} earned a {grade} grade (before deductions)."
            )

            result = GradeResult(
                created=created_text,
                deadline=deadline_text,
                late=late,
                grade=grade,
            )
            logger.info(json.dumps(result.to_dict()))

        return result
