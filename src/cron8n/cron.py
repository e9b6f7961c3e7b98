"""
Cron helpers - validation, next-run previews, presets and timestamps.

parse_cron never raises for malformed input: an invalid expression is a
normal CronInfo with is_valid=False. validate_cron is the fail-fast wrapper.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from croniter import croniter

from .constants import DEFAULT_TIMEZONE
from .errors import ValidationError

CRON_FIELD_COUNT = 5


@dataclass
class CronInfo:
    """Result of parsing a cron expression."""

    expression: str
    is_valid: bool
    next_runs: list[datetime] = field(default_factory=list)
    error: str | None = None

    def to_dict(self) -> dict:
        data = {
            "expression": self.expression,
            "isValid": self.is_valid,
            "nextRuns": [run.isoformat() for run in self.next_runs],
        }
        if self.error:
            data["error"] = self.error
        return data


@dataclass(frozen=True)
class CronPreset:
    name: str
    expression: str
    description: str

    def to_dict(self) -> dict:
        return {"name": self.name, "expression": self.expression, "description": self.description}


CRON_PRESETS: tuple[CronPreset, ...] = (
    CronPreset("every-minute", "* * * * *", "Every minute"),
    CronPreset("hourly", "0 * * * *", "Every hour at minute 0"),
    CronPreset("daily", "0 0 * * *", "Every day at midnight"),
    CronPreset("weekly", "0 0 * * 0", "Every Sunday at midnight"),
    CronPreset("monthly", "0 0 1 * *", "First day of every month at midnight"),
)

TIMEZONE_OPTIONS: tuple[str, ...] = (
    "Europe/Istanbul",
    "Europe/London",
    "Europe/Paris",
    "Europe/Berlin",
    "America/New_York",
    "America/Los_Angeles",
    "America/Chicago",
    "Asia/Tokyo",
    "Asia/Shanghai",
    "Asia/Dubai",
    "Australia/Sydney",
    "UTC",
)


def parse_cron(
    expression: str,
    tz: str = DEFAULT_TIMEZONE,
    count: int = 5,
    now: datetime | None = None,
) -> CronInfo:
    """
    Validate a 5-field cron expression and compute its next runs.

    Args:
        expression: Cron expression (minute hour day-of-month month day-of-week)
        tz: IANA timezone name the schedule is evaluated in
        count: Number of upcoming runs to compute
        now: Reference instant (defaults to the current time)

    Returns:
        CronInfo with `count` ascending timezone-aware datetimes strictly after
        `now`, or is_valid=False with an error message.
    """
    fields = expression.split() if isinstance(expression, str) else []
    if len(fields) != CRON_FIELD_COUNT:
        return CronInfo(
            expression=expression,
            is_valid=False,
            error=f"Expected {CRON_FIELD_COUNT} fields (minute hour day month weekday), got {len(fields)}",
        )

    try:
        zone = ZoneInfo(tz)
    except (ZoneInfoNotFoundError, ValueError):
        return CronInfo(expression=expression, is_valid=False, error=f"Unknown timezone: {tz}")

    start = (now or datetime.now(timezone.utc)).astimezone(zone)

    try:
        iterator = croniter(" ".join(fields), start)
        next_runs = [iterator.get_next(datetime) for _ in range(count)]
    except (ValueError, KeyError, TypeError) as e:
        return CronInfo(expression=expression, is_valid=False, error=str(e) or "Invalid cron expression")

    return CronInfo(expression=expression, is_valid=True, next_runs=next_runs)


def validate_cron(expression: str, tz: str = DEFAULT_TIMEZONE) -> CronInfo:
    """Validate a cron expression, raising ValidationError if it is invalid."""
    info = parse_cron(expression, tz)
    if not info.is_valid:
        raise ValidationError(f"Invalid cron expression: {expression}", info.error)
    return info


def get_preset(name: str) -> CronPreset | None:
    """Look up a preset by name."""
    return next((p for p in CRON_PRESETS if p.name == name), None)


def format_date(value: datetime) -> str:
    """Format a datetime for display, e.g. 'Sun, Oct 18, 2026, 09:00:00 AM +03'."""
    return value.strftime("%a, %b %d, %Y, %I:%M:%S %p %Z")


def iso_timestamp(now: datetime | None = None) -> str:
    """Current UTC time as ISO-8601 with milliseconds and a Z suffix."""
    value = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def archive_timestamp(now: datetime | None = None) -> str:
    """ISO timestamp safe for file names (':' and '.' replaced by '-')."""
    return iso_timestamp(now).replace(":", "-").replace(".", "-")
