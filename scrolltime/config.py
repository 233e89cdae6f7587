import datetime
import os
import pathlib
import tomllib
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

CONFIG_FILENAME = 'config.toml'
CONFIG_ENV_VAR = 'SCROLLTIME_CONFIG'
SELF_DIR = pathlib.Path(__file__).parent.resolve()

CONFIG_SCHEMA = {
    'fallback': {
        'sunrise': {'default': datetime.time(6, 0)},
        'sunset': {'default': datetime.time(18, 0)},
        'time_zone': {'default': None},
    },
    'location': {
        'fallback_latitude': {'default': 40.7128},
        'fallback_longitude': {'default': -74.0060},
        'ip_lookup': {'default': False},
        'ip_lookup_url': {'default': 'http://ip-api.com/json'},
        'latitude': {'default': None},
        'longitude': {'default': None},
        'timeout': {'default': 10},
    },
    'scheduler': {
        'interval': {'default': 1.0},
    },
    'segments': {
        'count': {'default': 12},
    },
    'sun': {
        'api_url': {'default': 'https://api.sunrise-sunset.org/json'},
        'request_timeout': {'default': 10},
        'timeout': {'default': 15},
    },
}


class ConfigError(Exception):
    pass


class Config:
    def __init__(self, config_file=None):
        if config_file is None:
            config_file = os.environ.get(CONFIG_ENV_VAR, SELF_DIR / CONFIG_FILENAME)

        self.config_file = pathlib.Path(config_file)

    def get_config_dict(self):
        try:
            with open(self.config_file, 'rb') as f:
                return tomllib.load(f)
        except FileNotFoundError:
            return {}

    def gimme(self, lookup):
        cfg = self.get_config_dict()
        parts = lookup.split('.')

        if len(parts) == 2:
            section, key = parts

            try:
                schema = CONFIG_SCHEMA[section][key]
            except KeyError:
                raise ConfigError(f'not a valid config lookup: {lookup}')

            try:
                return cfg[section][key]
            except KeyError:
                pass

            try:
                return schema['default']
            except KeyError:
                raise ConfigError(f'config key is required: {lookup}')

        raise ConfigError(f'not a valid config lookup: {lookup}')

    def gimme_time_zone(self):
        '''
        Time zone the civil-day fallback and "today" are anchored to: an IANA
        name from `fallback.time_zone`, or None for the host's local zone,
        resolved afresh at each use so DST changes are followed.
        '''
        name = self.gimme('fallback.time_zone')
        if name is None:
            return None

        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError):
            raise ConfigError(f'unknown time zone: {name}')


config = Config()
