from __future__ import annotations

import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from .errors import QuoteUnavailable
from .schemas import Quote
from .settings import Settings

logger = logging.getLogger(__name__)

DEFAULT_QUOTE_HOST = "quotes15.p.rapidapi.com"
DEFAULT_QUOTE_URL = "https://quotes15.p.rapidapi.com/quotes/random/"


# PUBLIC_INTERFACE
class QuoteFetcher:
    """
    Client for the RapidAPI "quotes15" random quote endpoint.

    A new httpx client is opened per call, so one fetcher can be shared by
    concurrent request handlers. Pass `transport` to route requests somewhere
    other than the network (e.g. httpx.MockTransport in tests).
    """

    def __init__(
        self,
        api_key: str,
        *,
        host: str = DEFAULT_QUOTE_HOST,
        url: str = DEFAULT_QUOTE_URL,
        language_code: str = "en",
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._api_key = api_key
        self._host = host
        self._url = url
        self._language_code = language_code
        self._timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> Optional["QuoteFetcher"]:
        """Return a fetcher for the configured API key, or None when no key is set."""
        if not settings.rapidapi_key:
            return None
        return cls(
            settings.rapidapi_key,
            host=settings.quote_api_host,
            url=settings.quote_api_url,
            timeout=settings.quote_timeout_seconds,
        )

    def fetch_random(self) -> Quote:
        """
        Fetch one random quote.

        Raises:
            QuoteUnavailable: on transport errors, a non-200 status or a body
            that does not describe a quote.
        """
        headers = {"X-RapidAPI-Key": self._api_key, "X-RapidAPI-Host": self._host}
        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                response = client.get(
                    self._url,
                    headers=headers,
                    params={"language_code": self._language_code},
                )
        except httpx.HTTPError as exc:
            logger.warning("Quote API request failed: %s", exc)
            raise QuoteUnavailable(f"quote API request failed: {exc.__class__.__name__}") from exc

        if response.status_code != httpx.codes.OK:
            logger.warning("Quote API answered with status %d", response.status_code)
            raise QuoteUnavailable(f"unexpected response code {response.status_code}")

        try:
            return Quote.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise QuoteUnavailable("quote API returned an invalid body") from exc
