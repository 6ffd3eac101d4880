from datetime import date, datetime

DATE_FORMAT = "%d/%m/%Y"


def parse_date(value: str | date | datetime | None) -> date | None:
    """Accept ``YYYY-MM-DD`` or full ISO timestamps and return the date part."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).split("T", 1)[0])


def month_bounds(day: date) -> tuple[date, date]:
    """First day of ``day``'s month and first day of the following month."""
    start = day.replace(day=1)
    if start.month == 12:
        return start, start.replace(year=start.year + 1, month=1)
    return start, start.replace(month=start.month + 1)


def format_date(value: date | None) -> str:
    return value.strftime(DATE_FORMAT) if value else ""
