"""Business-day arithmetic with weekly rest days, holidays and Easter."""

from __future__ import annotations

import bisect
import calendar
import datetime
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, Tuple

_VERSION = "PostgreSQL PLVdate, version 3.7, October 2018"

MAX_HOLIDAYS = 30
MAX_EXCEPTIONS = 50

SUNDAY = 0
SATURDAY = 6

# Day names indexed with Sunday as 0.
_DAY_NAMES = (
    "sunday",
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
)

_ONE_DAY = datetime.timedelta(days=1)

Holiday = Tuple[int, int]  # (month, day)


@dataclass(frozen=True)
class _Culture:
    name: str
    nonbizdays: FrozenSet[int]
    use_easter: bool
    use_great_friday: bool
    holidays: Tuple[Holiday, ...]


def _days(*pairs: Tuple[int, int]) -> Tuple[Holiday, ...]:
    """Turn (day, month) pairs into sorted (month, day) pairs."""
    return tuple(sorted((month, day) for day, month in pairs))


_WEEKEND = frozenset({SUNDAY, SATURDAY})

_CULTURES: Tuple[_Culture, ...] = (
    _Culture(
        "Czech", _WEEKEND, True, True,
        _days((1, 1), (1, 5), (8, 5), (5, 7), (6, 7), (28, 9), (28, 10),
              (17, 11), (24, 12), (25, 12), (26, 12)),
    ),
    _Culture(
        "Germany", _WEEKEND, True, True,
        _days((1, 1), (1, 5), (25, 5), (4, 6), (5, 6), (15, 8), (3, 10),
              (25, 12), (26, 12)),
    ),
    _Culture(
        "Poland", _WEEKEND, True, False,
        _days((1, 1), (1, 5), (3, 5), (15, 6), (15, 8), (1, 11), (11, 11),
              (25, 12), (26, 12)),
    ),
    _Culture(
        "Austria", _WEEKEND, True, False,
        _days((1, 1), (6, 1), (1, 5), (25, 5), (4, 6), (5, 6), (15, 6),
              (15, 8), (26, 10), (1, 11), (8, 12), (25, 12), (26, 12)),
    ),
    _Culture(
        "Slovakia", _WEEKEND, True, True,
        _days((1, 1), (6, 1), (1, 5), (8, 5), (5, 7), (29, 8), (1, 9),
              (15, 9), (1, 11), (17, 11), (24, 12), (25, 12), (26, 12)),
    ),
    _Culture(
        "Russia", _WEEKEND, False, False,
        _days((1, 1), (2, 1), (3, 1), (4, 1), (5, 1), (7, 1), (23, 2),
              (8, 3), (1, 5), (9, 5), (12, 6), (4, 11)),
    ),
    _Culture(
        "Gb", _WEEKEND, True, True,
        _days((1, 1), (2, 1), (1, 5), (29, 5), (28, 8), (25, 12), (26, 12)),
    ),
    _Culture(
        "Usa", _WEEKEND, False, False,
        _days((1, 1), (16, 1), (20, 2), (29, 5), (4, 7), (4, 9), (9, 10),
              (11, 11), (23, 11), (25, 12)),
    ),
)

_CULTURE_INDEX: Dict[str, int] = {
    culture.name.lower(): index for index, culture in enumerate(_CULTURES)
}

_CZECH = _CULTURE_INDEX["czech"]


def _dow(day: datetime.date) -> int:
    """Day of week with Sunday as 0."""
    return (day.weekday() + 1) % 7


def _day_number(name: str) -> int:
    try:
        return _DAY_NAMES.index(name.strip().lower())
    except ValueError:
        raise ValueError("invalid value for DAY/Day/day") from None


def easter_sunday(year: int) -> datetime.date:
    """Return the date of Easter Sunday; defined for years 1900 to 2099."""
    if year < 1900 or year > 2099:
        raise ValueError(
            "date is out of range: Easter is defined only for years "
            "between 1900 and 2099"
        )
    b = 255 - 11 * (year % 19)
    d = ((b - 21) % 30) + 21
    if d > 38:
        d -= 1
    e = (year + year // 4 + d + 1) % 7
    q = d + 7 - e
    if q < 32:
        return datetime.date(year, 3, q)
    return datetime.date(year, 4, q - 31)


def days_inmonth(day: datetime.date) -> int:
    """Return the number of days in the month of ``day``."""
    return calendar.monthrange(day.year, day.month)[1]


def isleapyear(day: datetime.date) -> bool:
    """Return True when the year of ``day`` is a leap year."""
    y = day.year
    return (y % 4 == 0 and y % 100 != 0) or y % 400 == 0


def version() -> str:
    """Return the version string of the business calendar."""
    return _VERSION


@dataclass
class BusinessCalendar:
    """A configurable calendar of business and non-business days."""

    nonbizdays: set = field(default_factory=lambda: set(_WEEKEND))
    use_easter: bool = True
    use_great_friday: bool = True
    include_start: bool = True
    country: Optional[str] = None
    holidays: List[Holiday] = field(default_factory=list)
    exceptions: List[datetime.date] = field(default_factory=list)

    def _country_id(self) -> Optional[int]:
        if self.country is None:
            return None
        return _CULTURE_INDEX.get(self.country.lower())

    def _easter_holiday(self, day: datetime.date) -> bool:
        if not (self.use_great_friday or self.use_easter):
            return False
        if day.month not in (3, 4):
            return False
        sunday = easter_sunday(day.year)
        if self.use_easter and day in (sunday, sunday + _ONE_DAY):
            return True
        if self.use_great_friday and day == sunday - 2 * _ONE_DAY:
            # Great Friday became a Czech holiday in 2016.
            if self._country_id() == _CZECH:
                return day.year >= 2016
            return True
        return False

    def _is_exception(self, day: datetime.date) -> bool:
        index = bisect.bisect_left(self.exceptions, day)
        return index < len(self.exceptions) and self.exceptions[index] == day

    def _is_holiday(self, day: datetime.date) -> bool:
        key = (day.month, day.day)
        index = bisect.bisect_left(self.holidays, key)
        return index < len(self.holidays) and self.holidays[index] == key

    def _free_day(self, day: datetime.date, weekday: int) -> bool:
        return (
            weekday in self.nonbizdays
            or self._is_exception(day)
            or self._easter_holiday(day)
            or self._is_holiday(day)
        )

    def add_bizdays(self, day: datetime.date, days: int) -> datetime.date:
        """Return the date ``days`` business days after (or before) ``day``."""
        step = _ONE_DAY if days > 0 else -_ONE_DAY
        unit = 1 if days > 0 else -1
        while days != 0:
            day += step
            if self._free_day(day, _dow(day)):
                continue
            days -= unit
        return day

    def nearest_bizday(self, day: datetime.date) -> datetime.date:
        """Return the business day closest to ``day``; ties go backwards."""
        before = self.add_bizdays(day, -1)
        after = self.add_bizdays(day, 1)
        if (day - before) > (after - day):
            return after
        return before

    def next_bizday(self, day: datetime.date) -> datetime.date:
        """Return the first business day after ``day``."""
        return self.add_bizdays(day, 1)

    def prev_bizday(self, day: datetime.date) -> datetime.date:
        """Return the last business day before ``day``."""
        return self.add_bizdays(day, -1)

    def bizdays_between(self, day1: datetime.date, day2: datetime.date) -> int:
        """Count business days between two dates, in either order."""
        start, end = sorted((day1, day2))
        count = 0
        start_is_bizday = False
        span = (end - start).days
        for offset in range(span + 1):
            weekday = _dow(start + datetime.timedelta(days=offset))
            # The weekday is taken one day behind the date that is checked
            # against exceptions and holidays.
            checked = start + datetime.timedelta(days=offset + 1)
            if self._free_day(checked, weekday):
                continue
            if offset == 0:
                start_is_bizday = True
            count += 1
        if start_is_bizday and not self.include_start and count > 0:
            count -= 1
        return count

    def isbizday(self, day: datetime.date) -> bool:
        """Return True when ``day`` is a business day."""
        return not self._free_day(day, _dow(day))

    def set_nonbizday_dow(self, dow: str) -> None:
        """Mark a day of the week (by name) as a non-business day."""
        number = _day_number(dow)
        if len(self.nonbizdays | {number}) == 7:
            raise ValueError(
                "nonbizday registration error: One day in week have to be bizday."
            )
        self.nonbizdays.add(number)

    def unset_nonbizday_dow(self, dow: str) -> None:
        """Make a day of the week (by name) a business day again."""
        self.nonbizdays.discard(_day_number(dow))

    def set_nonbizday_day(self, day: datetime.date, repeat: bool = False) -> None:
        """Register ``day`` as non-business; ``repeat`` makes it yearly."""
        if repeat:
            if len(self.holidays) >= MAX_HOLIDAYS:
                raise OverflowError(
                    "nonbizday registration error: Too much registered nonbizdays."
                )
            if self._is_holiday(day):
                raise ValueError("nonbizday registration error: Date is registered.")
            bisect.insort(self.holidays, (day.month, day.day))
        else:
            if len(self.exceptions) >= MAX_EXCEPTIONS:
                raise OverflowError(
                    "nonbizday registration error: "
                    "Too much registered nonrepeated nonbizdays."
                )
            if self._is_exception(day):
                raise ValueError("nonbizday registration error: Date is registered.")
            bisect.insort(self.exceptions, day)

    def unset_nonbizday_day(self, day: datetime.date, repeat: bool = False) -> None:
        """Remove a registered non-business day."""
        try:
            if repeat:
                self.holidays.remove((day.month, day.day))
            else:
                self.exceptions.remove(day)
        except ValueError:
            raise LookupError(
                "nonbizday unregistration error: Nonbizday not found."
            ) from None

    def default_holidays(self, country: str) -> None:
        """Load the national defaults of ``country`` and drop exceptions."""
        index = _CULTURE_INDEX.get(country.strip().lower())
        if index is None:
            raise ValueError("invalid value for STATE/State/state")
        culture = _CULTURES[index]
        self.country = culture.name
        self.nonbizdays = set(culture.nonbizdays)
        self.use_easter = culture.use_easter
        self.use_great_friday = culture.use_great_friday
        self.exceptions = []
        self.holidays = list(culture.holidays)