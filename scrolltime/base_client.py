import requests

USER_AGENT = 'scrolltime/1.0'


class ServiceClientException(Exception):
    pass


class ServiceClient:
    def __init__(self, base_url, timeout):
        self.base_url = base_url
        self.timeout = timeout

        self.session = requests.Session()
        self.session.headers.update({'User-Agent': USER_AGENT})

    def get_json(self, params=None):
        try:
            response = self.session.get(url=self.base_url, params=params, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as e:
            raise ServiceClientException(f'{self.base_url}: {e}') from e
        except ValueError as e:
            raise ServiceClientException(f'{self.base_url}: response is not JSON') from e

        if not isinstance(payload, dict):
            raise ServiceClientException(f'{self.base_url}: expected a JSON object')

        return payload

    def close(self):
        self.session.close()
