"""HTTP page fetching with fixed-interval pacing."""

import logging
import random
import time
from typing import Optional

import requests
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from .page_cache import PageCache
from .dataclasses import ImporterConfig
from .exceptions import FetchError


class PageFetcher:
    """Fetches page text one request at a time.

    Every network request is spaced at least ``min_request_interval`` seconds
    from the previous one, whether that request succeeded or not. Cache hits
    never touch the network and are not paced.
    """

    def __init__(self, config: ImporterConfig, session: Optional[requests.Session] = None,
                 page_cache: Optional[PageCache] = None) -> None:
        self.config = config
        self.page_cache = page_cache
        self.logger = logging.getLogger(__name__)

        self.session = session or requests.Session()
        self.session.headers.update({'User-Agent': config.user_agent})

        self._last_request_time: Optional[float] = None

    def close(self) -> None:
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        del exc_type, exc_val, exc_tb
        self.close()

    def fetch(self, url: str) -> str:
        """Return the body of ``url`` as text.

        Raises:
            FetchError: transport failure or non-2xx status (after the
                configured number of attempts).
        """
        if self.page_cache:
            cached = self.page_cache.get(url)
            if cached is not None:
                return cached

        attempts = max(1, self.config.max_attempts)
        fetch_with_retry = retry(
            stop=stop_after_attempt(attempts),
            wait=wait_exponential(multiplier=self.config.retry_delay, min=self.config.retry_delay, max=30),
            retry=retry_if_exception_type(FetchError),
            reraise=True,
        )(self._get)
        html = fetch_with_retry(url)

        if self.page_cache:
            self.page_cache.put(url, html)
        return html

    def _get(self, url: str) -> str:
        """Issue a single paced GET request."""
        self._wait_for_rate_limit()
        try:
            self.logger.debug(f"GET {url}")
            response = self.session.get(url, timeout=self.config.request_timeout)
        except requests.RequestException as e:
            raise FetchError(url, cause=e) from e
        finally:
            self._update_request_time()

        if not 200 <= response.status_code < 300:
            raise FetchError(url, status=response.status_code)
        return response.text

    def _wait_for_rate_limit(self) -> None:
        """Sleep until the minimum interval since the last request has passed."""
        if self.config.min_request_interval <= 0:
            return

        if self._last_request_time is None:
            return

        elapsed = time.monotonic() - self._last_request_time
        base_delay = self.config.min_request_interval

        if self.config.humanize_request_interval:
            jitter = random.uniform(-0.25, 0.25) * base_delay
            delay_needed = base_delay + jitter
        else:
            delay_needed = base_delay

        wait_time = delay_needed - elapsed
        if wait_time > 0:
            self.logger.debug(f"Rate limiting: waiting {wait_time:.2f}s before next request")
            time.sleep(wait_time)

    def _update_request_time(self) -> None:
        self._last_request_time = time.monotonic()
