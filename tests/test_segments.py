from datetime import timedelta

import pytest

from conftest import DAY, utc
from scrolltime.models import PHASE, SunEvents, phase_for
from scrolltime.segments import compute, validate_segment_count


def test_mid_morning_segment(day_events):
    state = compute(day_events, utc(9, 30), 12)

    assert state.current_segment_index == 4
    assert state.segment_count == 12
    assert state.segment_duration_minutes == 60
    assert state.remaining_minutes == 30
    assert state.remaining_seconds == 0
    assert state.progress_fraction == pytest.approx(0.5)
    assert state.countdown() == '30:00'


def test_before_sunrise_counts_down_to_sunrise(day_events):
    state = compute(day_events, utc(5), 12)

    assert state.current_segment_index == 12
    assert state.progress_fraction == 1.0
    assert state.remaining_minutes == 60
    assert state.remaining_seconds == 0
    assert state.segment_duration_minutes == 60


def test_after_sunset_has_nothing_remaining(day_events):
    state = compute(day_events, utc(21, 15), 12)

    assert state.current_segment_index == 12
    assert state.progress_fraction == 1.0
    assert state.remaining_minutes == 0
    assert state.remaining_seconds == 0
    assert state.remaining == timedelta(0)


def test_single_segment_spans_whole_day(day_events):
    state = compute(day_events, utc(12), 1)

    assert state.current_segment_index == 1
    assert state.progress_fraction == pytest.approx(0.5)
    assert state.remaining_minutes == 360
    assert state.segment_duration_minutes == 720


def test_exactly_at_sunrise_and_sunset(day_events):
    at_sunrise = compute(day_events, utc(6), 12)
    assert at_sunrise.current_segment_index == 1
    assert at_sunrise.progress_fraction == 0.0
    assert at_sunrise.remaining_minutes == 60

    at_sunset = compute(day_events, utc(18), 12)
    assert at_sunset.current_segment_index == 12
    assert at_sunset.progress_fraction == 1.0
    assert (at_sunset.remaining_minutes, at_sunset.remaining_seconds) == (0, 0)


def test_minutes_and_seconds_are_truncated(day_events):
    # 59m 59.9s left in the segment
    state = compute(day_events, utc(7, 0, 0, 100_000), 12)

    assert state.remaining_minutes == 59
    assert state.remaining_seconds == 59

    # under a second left displays as 0:00
    state = compute(day_events, utc(7, 59, 59, 500_000), 12)
    assert state.countdown() == '0:00'
    assert state.current_segment_index == 2


def test_pre_sunrise_remainder_is_truncated(day_events):
    state = compute(day_events, utc(4, 29, 30, 250_000), 12)

    assert state.remaining_minutes == 90
    assert state.remaining_seconds == 29


def test_sun_events_pass_through_unchanged(day_events):
    for now in (utc(3), utc(10), utc(23)):
        state = compute(day_events, now, 7)
        assert state.sunrise is day_events.sunrise
        assert state.sunset is day_events.sunset


@pytest.mark.parametrize('segment_count', [1, 2, 5, 12, 24])
def test_boundaries_advance_one_segment_at_a_time(day_events, segment_count):
    duration = day_events.daylight_span / segment_count

    for k in range(segment_count):
        boundary = day_events.sunrise + k * duration
        assert compute(day_events, boundary, segment_count).current_segment_index == k + 1

        if k > 0:
            just_before = boundary - timedelta(milliseconds=1)
            assert compute(day_events, just_before, segment_count).current_segment_index == k

    final = compute(day_events, day_events.sunrise + segment_count * duration, segment_count)
    assert final.current_segment_index == segment_count


def test_progress_rises_and_remaining_falls_within_a_segment(day_events):
    start = utc(10)
    states = [compute(day_events, start + timedelta(seconds=s), 12) for s in range(0, 3600, 7)]

    for earlier, later in zip(states, states[1:]):
        assert earlier.current_segment_index == later.current_segment_index == 5
        assert later.progress_fraction > earlier.progress_fraction
        assert later.remaining <= earlier.remaining

    assert states[-1].remaining < states[0].remaining


def test_uneven_span_stays_in_bounds():
    events = SunEvents(sunrise=utc(5, 17, 23, 411_000), sunset=utc(20, 48, 2, 7_000), date_key=DAY)

    for segment_count in (1, 3, 7, 12, 13, 100):
        now = events.sunrise - timedelta(hours=30)
        while now < events.sunset + timedelta(hours=30):
            state = compute(events, now, segment_count)

            assert 1 <= state.current_segment_index <= segment_count
            assert 0.0 <= state.progress_fraction <= 1.0
            assert state.remaining_minutes >= 0
            assert 0 <= state.remaining_seconds <= 59

            now += timedelta(minutes=17, seconds=13, microseconds=3)


def test_phase_thirds_for_twelve_segments():
    assert [phase_for(i, 12) for i in range(1, 13)] == (
        [PHASE.DAWN] * 4 + [PHASE.RISE] * 4 + [PHASE.ASCEND] * 4)


def test_phase_on_state(day_events):
    assert compute(day_events, utc(7), 12).phase == PHASE.DAWN
    assert compute(day_events, utc(11), 12).phase == PHASE.RISE
    assert compute(day_events, utc(20), 12).phase == PHASE.ASCEND


@pytest.mark.parametrize('bad', [0, -3, 1.5, '12', True, None])
def test_bad_segment_count_is_rejected(day_events, bad):
    with pytest.raises(ValueError):
        compute(day_events, utc(9), bad)


def test_validate_segment_count_returns_value():
    assert validate_segment_count(12) == 12
