#!/usr/bin/env python3
"""
HTTP client for the UK repeater directory API
Performs single-attempt GET requests and classifies every failure
"""

import logging
from typing import Optional

import requests
from requests.adapters import HTTPAdapter

from .errors import ConnectError, HTTPNotFoundError, RequestBuildError, UnexpectedStatusError


class RepeaterAPIClient:
    """Fetches raw response bodies from the repeater API.

    Each call is one attempt; the adapter is mounted without retries.
    """

    HEADERS = {'Content-Type': 'application/json'}

    def __init__(self, timeout: Optional[float] = None, pool_maxsize: int = 10,
                 logger: Optional[logging.Logger] = None,
                 session: Optional[requests.Session] = None):
        self.logger = logger or logging.getLogger('UKRepeaterBot')
        # None leaves the transport default in place
        self.timeout = timeout if timeout else None
        self.session = session or self._create_session(pool_maxsize)

    def _create_session(self, pool_maxsize: int) -> requests.Session:
        """Create a pooled requests session with retries disabled"""
        session = requests.Session()
        adapter = HTTPAdapter(
            max_retries=0,
            pool_connections=1,
            pool_maxsize=pool_maxsize
        )
        session.mount("https://", adapter)
        session.mount("http://", adapter)
        return session

    def fetch(self, url: str) -> bytes:
        """GET a URL and return the whole body.

        Args:
            url: Fully formed URL to request.

        Returns:
            bytes: The response body of a 200 answer.

        Raises:
            RequestBuildError: If no request can be built for the URL.
            ConnectError: If the server cannot be reached or the body cannot be read.
            HTTPNotFoundError: If the server answers 404.
            UnexpectedStatusError: For any other non-200 answer.
        """
        self.logger.debug(f"Fetching {url}")
        try:
            response = self.session.get(url, headers=self.HEADERS, timeout=self.timeout, stream=True)
        except (requests.exceptions.MissingSchema,
                requests.exceptions.InvalidSchema,
                requests.exceptions.InvalidURL,
                requests.exceptions.URLRequired) as e:
            self.logger.warning(f"Could not build request for {url}: {e}")
            raise RequestBuildError() from e
        except requests.exceptions.RequestException as e:
            self.logger.warning(f"Request to {url} failed: {e}")
            raise ConnectError() from e

        with response:
            if response.status_code == 404:
                raise HTTPNotFoundError()
            if response.status_code != 200:
                self.logger.warning(f"Repeater API returned status {response.status_code} for {url}")
                raise UnexpectedStatusError(response.status_code)

            try:
                body = response.content
            except requests.exceptions.RequestException as e:
                self.logger.warning(f"Could not read response from {url}: {e}")
                raise ConnectError("Error extracting data") from e

        self.close_idle_connections()
        return body

    def close_idle_connections(self) -> None:
        """Close pooled connections that are not in use"""
        for adapter in self.session.adapters.values():
            adapter.close()

    def close(self) -> None:
        """Close the underlying session"""
        self.session.close()
