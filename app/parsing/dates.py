from datetime import datetime, timedelta, timezone

from app.models.schemas import ResolvedDate

MONTH_NAMES = (
    "Январь", "Февраль", "Март", "Апрель", "Май", "Июнь",
    "Июль", "Август", "Сентябрь", "Октябрь", "Ноябрь", "Декабрь",
)
UNKNOWN_MONTH = "Неизвестный месяц"
CENTURY_THRESHOLD = 50


def month_name(month: int) -> str:
    """Russian month name for 1..12."""
    if 1 <= month <= 12:
        return MONTH_NAMES[month - 1]
    return UNKNOWN_MONTH


def expand_year(yy: int) -> int:
    return 2000 + yy if yy < CENTURY_THRESHOLD else 1900 + yy


def short_date_to_datetime(raw_date: str) -> datetime:
    """Turn "ddmmyy" into noon UTC of that day.

    Day and month are not range-checked; overflow rolls into the following
    days/months ("310225" is 3 March 2025, "001325" is 31 December 2025).
    """
    day, month, yy = int(raw_date[0:2]), int(raw_date[2:4]), int(raw_date[4:6])
    year, month_index = divmod(expand_year(yy) * 12 + month - 1, 12)
    first = datetime(year, month_index + 1, 1, 12, tzinfo=timezone.utc)
    return first + timedelta(days=day - 1)


def _noon_utc(moment: datetime) -> datetime:
    moment = moment.astimezone(timezone.utc) if moment.tzinfo else moment.replace(tzinfo=timezone.utc)
    return moment.replace(hour=12, minute=0, second=0, microsecond=0)


def resolve_date(raw_date: str | None = None, now: datetime | None = None) -> ResolvedDate:
    if raw_date:
        moment = short_date_to_datetime(raw_date)
    else:
        moment = _noon_utc(now or datetime.now(timezone.utc))
    return ResolvedDate(
        iso_date=moment.date().isoformat(),
        month_name=month_name(moment.month),
        year=str(moment.year),
    )
