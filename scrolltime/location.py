import asyncio
import inspect

from scrolltime.base_client import ServiceClient, ServiceClientException
from scrolltime.config import config
from scrolltime.log import log
from scrolltime.models import Coordinate, LocationResult


class LocationUnavailable(Exception):
    pass


def configured_location():
    latitude = config.gimme('location.latitude')
    longitude = config.gimme('location.longitude')

    if latitude is None or longitude is None:
        raise LocationUnavailable('no location configured')

    return Coordinate(latitude=float(latitude), longitude=float(longitude))


class IPGeolocator(ServiceClient):
    '''
    Approximate device location from the public IP address (ip-api.com
    protocol: `{"status": "success", "lat": ..., "lon": ...}`).
    '''

    @classmethod
    def build_client(cls):
        return cls(
            base_url=config.gimme('location.ip_lookup_url'),
            timeout=config.gimme('location.timeout'))

    async def __call__(self):
        return await asyncio.to_thread(self.locate)

    def locate(self):
        try:
            payload = self.get_json()
        except ServiceClientException as e:
            raise LocationUnavailable(str(e)) from e

        if payload.get('status') != 'success':
            raise LocationUnavailable(f'lookup failed: {payload.get("message", payload.get("status"))}')

        try:
            return Coordinate(latitude=float(payload['lat']), longitude=float(payload['lon']))
        except (KeyError, TypeError, ValueError) as e:
            raise LocationUnavailable(f'malformed lookup payload: {e}') from e


class SourceChain:
    '''
    Tries each location source in order, once, and returns the first
    coordinate. Sources that hold an HTTP session are closed with the chain.
    '''

    def __init__(self, sources):
        self.sources = list(sources)

    async def __call__(self):
        reasons = []
        for source in self.sources:
            try:
                return await _call_source(source)
            except LocationUnavailable as e:
                reasons.append(str(e))

        raise LocationUnavailable('; '.join(reasons))

    def close(self):
        for source in self.sources:
            if isinstance(source, ServiceClient):
                source.close()


def default_source():
    '''
    The configured coordinate if there is one, then (when enabled) an IP
    lookup.
    '''
    sources = [configured_location]
    if config.gimme('location.ip_lookup'):
        sources.append(IPGeolocator.build_client())

    return SourceChain(sources)


async def _call_source(source):
    result = source()
    if inspect.isawaitable(result):
        result = await result

    return result


class LocationResolver:
    def __init__(self, source=None, fallback=None, timeout=None):
        self.owns_source = source is None
        if source is None:
            source = default_source()
        if fallback is None:
            fallback = Coordinate(
                latitude=config.gimme('location.fallback_latitude'),
                longitude=config.gimme('location.fallback_longitude'))
        if timeout is None:
            timeout = config.gimme('location.timeout')

        self.source = source
        self.fallback = fallback
        self.timeout = timeout

    def close(self):
        if self.owns_source:
            self.source.close()

    async def resolve(self):
        try:
            coordinate = await asyncio.wait_for(_call_source(self.source), timeout=self.timeout)
        except LocationUnavailable as e:
            return self._fall_back(f'location unavailable ({e})')
        except TimeoutError:
            return self._fall_back(f'location timed out after {self.timeout}s')
        except ValueError as e:
            return self._fall_back(f'invalid location ({e})')

        if not isinstance(coordinate, Coordinate):
            return self._fall_back(f'location source returned {coordinate!r}')

        return LocationResult(coordinate=coordinate)

    def _fall_back(self, reason):
        warning = (
            f'{reason}; using default location '
            f'{self.fallback.latitude}, {self.fallback.longitude}')
        log.print(warning)

        return LocationResult(coordinate=self.fallback, warning=warning)
