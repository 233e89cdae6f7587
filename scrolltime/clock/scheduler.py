import asyncio

from scrolltime.config import config
from scrolltime.segments import compute, validate_segment_count
from . import clock as default_clock


class Subscription:
    '''
    Handle for one running tick chain. Calling it (or leaving a `with` block)
    cancels the pending timer; repeated calls are no-ops.
    '''

    def __init__(self, loop, interval, tick_fn):
        self.loop = loop
        self.interval = interval
        self.tick_fn = tick_fn
        self.handle = None
        self.active = True
        self.ticks = 0

    def __call__(self):
        self.unsubscribe()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, exc_traceback):
        self.unsubscribe()

    def unsubscribe(self):
        self.active = False

        if self.handle is not None:
            self.handle.cancel()
            self.handle = None

    def _schedule(self, delay):
        if not self.active:
            return

        if delay <= 0:
            self.handle = self.loop.call_soon(self._run)
        else:
            self.handle = self.loop.call_later(delay, self._run)

    def _run(self):
        self.handle = None
        if not self.active:
            return

        try:
            self.tick_fn()
        except BaseException:
            self.unsubscribe()
            raise

        self.ticks += 1
        self._schedule(self.interval)


class ClockScheduler:
    def __init__(self, clock=None, interval=None):
        if clock is None:
            clock = default_clock
        if interval is None:
            interval = config.gimme('scheduler.interval')

        if interval <= 0:
            raise ValueError(f'scheduler interval must be positive: {interval}')

        self.clock = clock
        self.interval = interval

    def start(self, sun_events, segment_count, on_tick):
        validate_segment_count(segment_count)
        loop = asyncio.get_running_loop()

        def tick():
            on_tick(compute(sun_events, self.clock.now(), segment_count))

        subscription = Subscription(loop, self.interval, tick)
        subscription._schedule(0)

        return subscription
