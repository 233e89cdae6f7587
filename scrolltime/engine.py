import asyncio

from scrolltime.clock import clock as default_clock
from scrolltime.clock.scheduler import ClockScheduler
from scrolltime.config import config
from scrolltime.location import LocationResolver
from scrolltime.log import log
from scrolltime.segments import validate_segment_count
from scrolltime.sun import SunDataUnavailable, SunriseSunsetClient, civil_day_fallback


class ScrollTimeEngine:
    '''
    Owns the whole chain: location -> sun events -> scheduler -> subscribers.

    Nothing is delivered to subscribers until `start()` has produced sun
    events. Both failure paths degrade instead of raising: an unavailable
    location falls back to a fixed coordinate (`location_warning`), and
    unavailable sun data falls back to the civil day (`using_default_timing`).
    When the local date rolls over, the scheduler is stopped, sun events are
    resolved again for the new day and ticking resumes for the same
    subscribers.
    '''

    def __init__(self, resolver=None, provider=None, scheduler=None, segment_count=None,
                 clock=None, tz=None, fetch_timeout=None):
        if segment_count is None:
            segment_count = config.gimme('segments.count')
        if clock is None:
            clock = default_clock
        if tz is None:
            tz = config.gimme_time_zone()
        if fetch_timeout is None:
            fetch_timeout = config.gimme('sun.timeout')

        self.segment_count = validate_segment_count(segment_count)
        self.clock = clock
        self.tz = tz
        self.fetch_timeout = fetch_timeout
        # Clients built here hold HTTP sessions and are closed with the engine.
        self.owned = []
        if resolver is None:
            resolver = LocationResolver()
            self.owned.append(resolver)
        if provider is None:
            provider = SunriseSunsetClient.build_client()
            self.owned.append(provider)

        self.resolver = resolver
        self.provider = provider
        self.scheduler = scheduler if scheduler is not None else ClockScheduler(clock=clock)

        self.location = None
        self.sun_events = None
        self.sun_warning = None
        self.last_state = None
        self.subscription = None
        self.refresh_task = None
        self.subscribers = {}
        self.closed = False

    @property
    def location_warning(self):
        return self.location.warning if self.location is not None else None

    @property
    def using_default_timing(self):
        return self.sun_events is not None and self.sun_events.is_approximate

    @property
    def running(self):
        return self.subscription is not None and self.subscription.active

    async def resolve_location(self):
        if self.location is None:
            self.location = await self.resolver.resolve()

        return self.location

    async def resolve_sun_events(self, day=None):
        if day is None:
            day = self.clock.today(self.tz)

        location = await self.resolve_location()

        try:
            events = await asyncio.wait_for(
                self.provider.fetch(location.coordinate, day, self.tz), timeout=self.fetch_timeout)
        except SunDataUnavailable as e:
            return self._fall_back(day, f'sun data unavailable ({e})')
        except TimeoutError:
            return self._fall_back(day, f'sun data timed out after {self.fetch_timeout}s')

        self.sun_warning = None
        log.print(f'sunrise={events.sunrise.isoformat()} sunset={events.sunset.isoformat()} for {day.isoformat()}')

        return events

    def _fall_back(self, day, reason):
        self.sun_warning = f'{reason}; using default timing'
        log.print(self.sun_warning)

        return civil_day_fallback(day, self.tz)

    async def start(self):
        if self.closed:
            raise RuntimeError('engine is closed')

        if self.running:
            return self

        events = await self.resolve_sun_events()

        # close() or a concurrent start() may have won while we were waiting.
        if not self.closed and not self.running:
            self._run(events)

        return self

    def _run(self, sun_events):
        self._stop_scheduler()
        self.sun_events = sun_events
        self.subscription = self.scheduler.start(sun_events, self.segment_count, self._on_tick)

    def _stop_scheduler(self):
        if self.subscription is not None:
            self.subscription.unsubscribe()
            self.subscription = None

    def _on_tick(self, state):
        last = self.last_state
        if last is None:
            log.print(f'segment {state.current_segment_index} of {state.segment_count}')
        elif last.current_segment_index != state.current_segment_index:
            log.print(f'segment {last.current_segment_index} -> {state.current_segment_index} ({state.phase.name})')

        self.last_state = state

        for on_update in list(self.subscribers.values()):
            on_update(state)

        if not self.sun_events.is_current(self.clock.today(self.tz)):
            self._begin_rollover()

    def _begin_rollover(self):
        self._stop_scheduler()
        log.print(f'date rolled over past {self.sun_events.date_key.isoformat()}; refreshing sun events')
        self.refresh_task = asyncio.get_running_loop().create_task(self._refresh())
        self.refresh_task.add_done_callback(self._refresh_done)

    @staticmethod
    def _refresh_done(task):
        if task.cancelled():
            return

        exc = task.exception()
        if exc is not None:
            task.get_loop().call_exception_handler({
                'message': 'refreshing sun events after date rollover failed',
                'exception': exc,
                'task': task})

    async def _refresh(self):
        events = await self.resolve_sun_events()

        if not self.closed:
            self._run(events)

    def subscribe(self, on_update):
        token = object()
        self.subscribers[token] = on_update

        def unsubscribe():
            self.subscribers.pop(token, None)

        return unsubscribe

    def close(self):
        self.closed = True
        self._stop_scheduler()

        if self.refresh_task is not None and not self.refresh_task.done():
            self.refresh_task.cancel()
        self.refresh_task = None

        self.subscribers.clear()

        for client in self.owned:
            client.close()
        self.owned = []

    async def __aenter__(self):
        return await self.start()

    async def __aexit__(self, exc_type, exc_value, exc_traceback):
        self.close()
