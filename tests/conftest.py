from datetime import date, datetime, timedelta, timezone

import pytest
import requests

from scrolltime.clock import Clock
from scrolltime.config import config
from scrolltime.models import SUN_SOURCE, SunEvents

DAY = date(2024, 6, 9)


def utc(hour, minute=0, second=0, microsecond=0, day=DAY):
    return datetime(day.year, day.month, day.day, hour, minute, second, microsecond, tzinfo=timezone.utc)


class FakeClock(Clock):
    def __init__(self, current):
        self.current = current
        self.reads = 0

    def now(self):
        self.reads += 1
        return self.current

    def advance(self, **kwargs):
        self.current += timedelta(**kwargs)


class FakeResponse:
    def __init__(self, payload=None, status_code=200, text=None):
        self.payload = payload
        self.status_code = status_code
        self.text = text

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f'{self.status_code} error', response=self)

    def json(self):
        if self.text is not None:
            raise ValueError(f'not json: {self.text}')
        return self.payload


class FakeSession:
    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.calls = []
        self.closed = False

    def get(self, url, params=None, timeout=None):
        self.calls.append({'url': url, 'params': params, 'timeout': timeout})
        if self.exc is not None:
            raise self.exc
        return self.response

    def close(self):
        self.closed = True


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    '''Point the config singleton at an empty location so only defaults apply.'''
    monkeypatch.setattr(config, 'config_file', tmp_path / 'missing.toml')
    return tmp_path


@pytest.fixture()
def write_config(tmp_path, monkeypatch):
    def write(text):
        path = tmp_path / 'config.toml'
        path.write_text(text)
        monkeypatch.setattr(config, 'config_file', path)
        return path

    return write


@pytest.fixture()
def day_events():
    return SunEvents(sunrise=utc(6), sunset=utc(18), date_key=DAY, source=SUN_SOURCE.SERVICE)
