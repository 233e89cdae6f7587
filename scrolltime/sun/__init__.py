import asyncio
from datetime import datetime

from scrolltime.base_client import ServiceClient, ServiceClientException
from scrolltime.clock import clock
from scrolltime.config import config
from scrolltime.models import Coordinate, SUN_SOURCE, SunEvents


class SunDataUnavailable(Exception):
    pass


def _local(day, wall_time, tz):
    if tz is None:
        # host zone, with the offset in effect on `day`
        return datetime.combine(day, wall_time).astimezone()

    return datetime.combine(day, wall_time, tzinfo=tz)


def civil_day_fallback(day, tz=None, sunrise=None, sunset=None):
    '''
    Approximate sun events for `day`: a fixed civil day in `tz` (the host's
    zone when None), 06:00 to
    18:00 unless other `datetime.time` bounds are given. The result is marked
    CIVIL_FALLBACK so it is never mistaken for astronomical data.
    '''
    if sunrise is None:
        sunrise = config.gimme('fallback.sunrise')
    if sunset is None:
        sunset = config.gimme('fallback.sunset')

    return SunEvents(
        sunrise=_local(day, sunrise, tz),
        sunset=_local(day, sunset, tz),
        date_key=day,
        source=SUN_SOURCE.CIVIL_FALLBACK)


class SunriseSunsetClient(ServiceClient):
    '''
    Client for the sunrise-sunset.org JSON API. With `formatted=0` the service
    answers in ISO 8601 UTC, which is compared directly against "now".
    '''

    @classmethod
    def build_client(cls):
        return cls(
            base_url=config.gimme('sun.api_url'),
            timeout=config.gimme('sun.request_timeout'))

    async def fetch(self, coordinate, day=None, tz=None):
        if not isinstance(coordinate, Coordinate):
            raise TypeError(f'expected a Coordinate, got {type(coordinate).__name__}')

        if day is None:
            day = clock.today(tz)

        return await asyncio.to_thread(self.fetch_blocking, coordinate, day)

    def fetch_blocking(self, coordinate, day):
        try:
            payload = self.get_json({
                'lat': coordinate.latitude,
                'lng': coordinate.longitude,
                'date': day.isoformat(),
                'formatted': 0})
        except ServiceClientException as e:
            raise SunDataUnavailable(str(e)) from e

        return self.parse(payload, day)

    @staticmethod
    def parse(payload, day):
        status = payload.get('status')
        if status != 'OK':
            raise SunDataUnavailable(f'service status: {status}')

        try:
            results = payload['results']
            sunrise = datetime.fromisoformat(results['sunrise'])
            sunset = datetime.fromisoformat(results['sunset'])
        except (KeyError, TypeError, ValueError) as e:
            raise SunDataUnavailable(f'malformed payload: {e}') from e

        try:
            return SunEvents(sunrise=sunrise, sunset=sunset, date_key=day, source=SUN_SOURCE.SERVICE)
        except ValueError as e:
            raise SunDataUnavailable(str(e)) from e
