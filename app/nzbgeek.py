"""NZBGeek search client: builds the indexer API URL and relays its JSON body."""

from typing import Any
from urllib.parse import quote

import httpx
import structlog
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from app.logging_config import redact

logger = structlog.get_logger()
tracer = trace.get_tracer(__name__)

DEFAULT_API_URL = "https://api.nzbgeek.info/api"
SEARCH_LIMIT = 200

# Characters encodeURIComponent leaves alone besides alphanumerics and -_.
_URI_COMPONENT_SAFE = "!~*'()"


class NzbGeekError(Exception):
    """Raised when the indexer cannot be reached or returns a non-JSON body."""


class NzbGeekClient:
    """Thin client for the NZBGeek search endpoint. One GET per search, no retry."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_API_URL,
        timeout: float | None = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self._transport = transport

    def build_search_url(self, query: str) -> str:
        """Return the full search URL; the API key is appended unescaped."""
        encoded = quote(query, safe=_URI_COMPONENT_SAFE)
        return (
            f"{self.base_url}?t=search&q={encoded}&limit={SEARCH_LIMIT}"
            f"&extended=1&o=json&apikey={self._api_key}"
        )

    def search(self, query: str) -> Any:
        """Run a search and return the decoded JSON body as-is. Raises NzbGeekError."""
        # Exceptions are not auto-recorded: their text can hold the full URL.
        with tracer.start_as_current_span(
            "nzbgeek.search",
            record_exception=False,
            set_status_on_exception=False,
        ) as span:
            span.set_attribute("search.query", query)
            logger.info("nzbgeek.search.start", query=query)
            try:
                with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                    response = client.get(self.build_search_url(query))
                span.set_attribute("http.status_code", response.status_code)
                data = response.json()
            except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
                error = redact(str(e), [self._api_key])
                span.set_attribute("error.type", type(e).__name__)
                span.set_status(Status(StatusCode.ERROR, error))
                logger.error(
                    "nzbgeek.search.failed",
                    query=query,
                    error_type=type(e).__name__,
                    error=error,
                )
                raise NzbGeekError("Failed to fetch from NZBgeek") from e
            logger.info(
                "nzbgeek.search.success",
                query=query,
                status_code=response.status_code,
            )
            return data
