"""Wall-clock source for dates, weekdays and timestamps."""
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo


def utcnow() -> datetime:
    """Naive UTC timestamp, the format stored in the database."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Clock:
    """Server clock. Calendar decisions use the programme timezone."""

    def __init__(self, timezone_name: str = 'UTC'):
        self.tz = timezone.utc if timezone_name == 'UTC' else ZoneInfo(timezone_name)

    def now(self) -> datetime:
        return utcnow()

    def today(self) -> date:
        return datetime.now(self.tz).date()

    def weekday(self) -> int:
        """Day of week for ``today()``, Monday == 0."""
        return self.today().weekday()
