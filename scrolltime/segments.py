'''
Divides the daylight span between sunrise and sunset into equal segments.

    from datetime import datetime, timezone
    from scrolltime.segments import compute

    state = compute(sun_events, datetime.now(tz=timezone.utc), 12)
    state.current_segment_index, state.countdown(), state.progress_fraction
    # (4, '30:00', 0.5)

`compute` is pure and total: for any `now` and any valid SunEvents (sunset
strictly after sunrise, which SunEvents itself enforces) it returns a fresh
SegmentState and never raises. The only error it reports is a segment count
below one, which is a configuration mistake rather than a runtime condition.
'''

from datetime import timedelta
from math import floor

from scrolltime.models import SegmentState

DEFAULT_SEGMENT_COUNT = 12
MS_PER_SECOND = 1000
MS_PER_MINUTE = 60 * MS_PER_SECOND
ONE_MS = timedelta(milliseconds=1)


def validate_segment_count(segment_count):
    if isinstance(segment_count, bool) or not isinstance(segment_count, int):
        raise ValueError(f'segment count must be an integer: {segment_count!r}')

    if segment_count < 1:
        raise ValueError(f'segment count must be at least 1: {segment_count}')

    return segment_count


def _split_remaining(remaining_ms):
    whole_seconds = floor(max(0.0, remaining_ms) / MS_PER_SECOND)
    return divmod(whole_seconds, 60)


def compute(sun_events, now, segment_count=DEFAULT_SEGMENT_COUNT):
    validate_segment_count(segment_count)

    sunrise = sun_events.sunrise
    sunset = sun_events.sunset

    span_ms = (sunset - sunrise) / ONE_MS
    duration_ms = span_ms / segment_count
    duration_minutes = duration_ms / MS_PER_MINUTE

    if now < sunrise:
        # Still inside the previous night's final segment.
        index = segment_count
        progress = 1.0
        remaining_ms = (sunrise - now) / ONE_MS
    elif now > sunset:
        index = segment_count
        progress = 1.0
        remaining_ms = 0.0
    else:
        elapsed_ms = (now - sunrise) / ONE_MS

        zero_based = floor(elapsed_ms / duration_ms)
        zero_based = max(0, min(segment_count - 1, zero_based))

        index = zero_based + 1
        elapsed_in_segment = elapsed_ms - zero_based * duration_ms
        remaining_ms = duration_ms - elapsed_in_segment
        progress = max(0.0, min(1.0, elapsed_in_segment / duration_ms))

    remaining_minutes, remaining_seconds = _split_remaining(remaining_ms)

    return SegmentState(
        current_segment_index=index,
        segment_count=segment_count,
        segment_duration_minutes=duration_minutes,
        remaining_minutes=remaining_minutes,
        remaining_seconds=remaining_seconds,
        progress_fraction=progress,
        sunrise=sunrise,
        sunset=sunset)
