from dataclasses import dataclass
from math import ceil

from scrolltime.clock import clock

SCROLL_YEAR_DAYS = 364  # 52 weeks of 7 days

GATES = (
    'Dawn Gate of Truth',
    'Light Gate of Wisdom',
    'Sun Gate of Justice',
    'Fire Gate of Righteousness',
    'Star Gate of Unity',
    'Moon Gate of Mercy',
    'Water Gate of Life',
)


@dataclass(frozen=True)
class ScrollDay:
    day_number: int  # 1..364
    week: int  # 1..52
    sabbath: bool
    gate: str


def scroll_day(day):
    '''
    Position of a calendar date in the 364-day scroll year. Days 365 and 366
    of the Gregorian year wrap around to scroll days 1 and 2.
    '''
    day_of_year = day.timetuple().tm_yday
    day_number = day_of_year if day_of_year <= SCROLL_YEAR_DAYS else day_of_year - SCROLL_YEAR_DAYS

    return ScrollDay(
        day_number=day_number,
        week=ceil(day_number / 7),
        sabbath=day_number % 7 == 0,
        gate=GATES[day_number % 7])


def gate_closing_time(tz=None):
    return clock.next_midnight(tz)
