'''
Value types passed between the location, sun-data, segmentation and clock
layers. Everything here is immutable; each tick produces a new SegmentState.
'''

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum


class SUN_SOURCE(Enum):
    SERVICE = 1
    CIVIL_FALLBACK = 2


class PHASE(Enum):
    DAWN = 1
    RISE = 2
    ASCEND = 3


def phase_for(segment_index, segment_count):
    '''
    DAWN covers the first third of the segments, RISE the second, ASCEND the
    rest. With 12 segments that is 1-4, 5-8 and 9-12.
    '''
    if segment_index * 3 <= segment_count:
        return PHASE.DAWN
    if segment_index * 3 <= segment_count * 2:
        return PHASE.RISE
    return PHASE.ASCEND


def _is_aware(dt):
    return dt.tzinfo is not None and dt.tzinfo.utcoffset(dt) is not None


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float

    def __post_init__(self):
        if not -90 <= self.latitude <= 90:
            raise ValueError(f'latitude out of range: {self.latitude}')

        if not -180 <= self.longitude <= 180:
            raise ValueError(f'longitude out of range: {self.longitude}')


@dataclass(frozen=True)
class LocationResult:
    coordinate: Coordinate
    warning: str | None = None

    @property
    def is_fallback(self):
        return self.warning is not None


@dataclass(frozen=True)
class SunEvents:
    sunrise: datetime
    sunset: datetime
    date_key: date
    source: SUN_SOURCE = SUN_SOURCE.SERVICE

    def __post_init__(self):
        if not _is_aware(self.sunrise):
            raise ValueError('sunrise datetime must be timezone aware')

        if not _is_aware(self.sunset):
            raise ValueError('sunset datetime must be timezone aware')

        if self.sunset <= self.sunrise:
            raise ValueError(f'sunset {self.sunset.isoformat()} is not after sunrise {self.sunrise.isoformat()}')

    @property
    def is_approximate(self):
        return self.source == SUN_SOURCE.CIVIL_FALLBACK

    @property
    def daylight_span(self):
        return self.sunset - self.sunrise

    def is_current(self, day):
        return self.date_key == day


@dataclass(frozen=True)
class SegmentState:
    current_segment_index: int  # 1-based
    segment_count: int
    segment_duration_minutes: float
    remaining_minutes: int
    remaining_seconds: int  # 0..59
    progress_fraction: float  # 0.0..1.0
    sunrise: datetime
    sunset: datetime

    @property
    def phase(self):
        return phase_for(self.current_segment_index, self.segment_count)

    @property
    def remaining(self):
        return timedelta(minutes=self.remaining_minutes, seconds=self.remaining_seconds)

    def countdown(self):
        return f'{self.remaining_minutes}:{self.remaining_seconds:02d}'
