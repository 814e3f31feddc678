import logging

import requests

logger = logging.getLogger(__name__)


class ProcessorError(Exception):
    pass


class Processor:
    """Base for processors that talk to a JSON HTTP API."""

    error_class = ProcessorError

    def __init__(self, timeout=10, user_agent=None, ssl_verify="true"):
        self.timeout = timeout
        self.ssl_verify = not (ssl_verify and str(ssl_verify).lower() == "false")
        self.headers = {"Accept": "application/json"}
        if user_agent:
            self.headers["User-Agent"] = user_agent

    def _get_json(self, url, params=None):
        try:
            response = requests.get(url, params=params, headers=self.headers, verify=self.ssl_verify, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"Exception when requesting {url}: {e}")
            raise self.error_class(f"HTTP request failed: {e}") from e

        if not 200 <= response.status_code < 300:
            logger.error(f"Request to {url} failed: {response.status_code} - {response.text}")
            raise self.error_class(f"HTTP request failed: status {response.status_code}")

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Failed to parse JSON: {e}, response text: {response.text}")
            raise self.error_class(f"HTTP request failed: invalid JSON response ({e})") from e
