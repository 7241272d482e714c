"""Bing web search implementing QuerySearch.

Queries the Bing Search API (Azure DataMarket flavour): the query text is
percent-encoded into a URL template together with the result cap, the
account key is sent as a basic-auth credential, and the JSON response's
``d.results`` array is parsed into :class:`SearchResult` objects via the
``Url``/``Title``/``Description`` record rule.

Every failure (timeout, transport, non-2xx status, undecodable JSON,
unexpected shape, malformed record) fails the whole search; records are
never skipped silently.
"""

from __future__ import annotations

import base64
from typing import Any
from urllib.parse import quote_plus

import httpx
import structlog

from src.interfaces.query_search import DEFAULT_MAX_RESULTS, QuerySearch
from src.models.search import SearchResult
from src.utils.errors import ConfigurationError, QueryExecutionError

logger = structlog.get_logger(logger_name=__name__)

DEFAULT_BING_URL_TEMPLATE = (
    "https://api.datamarket.azure.com/Bing/Search/Web"
    "?Query=%27{query}%27&$format=json&$top={top}"
)
_DEFAULT_TIMEOUT = 15.0


class BingSearch(QuerySearch):
    """One search against the Bing Search API.

    Parameters
    ----------
    query:
        The search query text.
    max_results:
        Result cap, sent to Bing as ``$top`` and enforced on the parsed list.
    account_key:
        Bing account key.  Required; injected from configuration.
    http_client:
        Optional shared ``httpx.AsyncClient``.  When omitted, a client is
        created for each execution and closed afterwards.
    url_template:
        Request URL template with ``{query}`` and ``{top}`` placeholders.
    timeout:
        Request timeout in seconds for the per-execution client.
    """

    engine_name = "bing"

    def __init__(
        self,
        query: str,
        max_results: int = DEFAULT_MAX_RESULTS,
        *,
        account_key: str,
        http_client: httpx.AsyncClient | None = None,
        url_template: str = DEFAULT_BING_URL_TEMPLATE,
        timeout: float = _DEFAULT_TIMEOUT,
    ) -> None:
        if not account_key:
            raise ConfigurationError(
                message="Bing account key is not configured (set BING_ACCOUNT_KEY)",
                provider_name=self.engine_name,
            )
        super().__init__(query, max_results)
        self._account_key = account_key
        self._client = http_client
        self._url_template = url_template
        self._timeout = timeout

    # ------------------------------------------------------------------
    # Request building
    # ------------------------------------------------------------------

    def build_request_url(self) -> str:
        """Return the request URL for this search's query and cap."""
        return self._url_template.format(
            query=quote_plus(self.query, encoding="utf-8"),
            top=self.max_results,
        )

    def build_headers(self) -> dict[str, str]:
        """Return the request headers, including the basic-auth credential."""
        # Bing expects the account key as both user name and password.
        token = base64.b64encode(f"{self._account_key}:{self._account_key}".encode("utf-8"))
        return {
            "Authorization": f"Basic {token.decode('ascii')}",
            "Accept": "application/json",
        }

    # ------------------------------------------------------------------
    # QuerySearch hook
    # ------------------------------------------------------------------

    async def _query_engine(self) -> list[SearchResult]:
        url = self.build_request_url()
        headers = self.build_headers()
        logger.debug("bing_request", url=url, max_results=self.max_results)

        if self._client is not None:
            response = await self._fetch(self._client, url, headers)
        else:
            async with httpx.AsyncClient(timeout=httpx.Timeout(self._timeout)) as client:
                response = await self._fetch(client, url, headers)

        results = self._parse_response(response)
        logger.debug("bing_response_parsed", query=self.query, result_count=len(results))
        return results

    async def _fetch(
        self,
        client: httpx.AsyncClient,
        url: str,
        headers: dict[str, str],
    ) -> httpx.Response:
        try:
            response = await client.get(url, headers=headers)
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise QueryExecutionError(
                message=f"Timeout querying Bing for {self.query!r}: {exc}",
                provider_name=self.engine_name,
            ) from exc
        except httpx.HTTPStatusError as exc:
            raise QueryExecutionError(
                message=f"HTTP {exc.response.status_code} from Bing for {self.query!r}",
                provider_name=self.engine_name,
            ) from exc
        except httpx.HTTPError as exc:
            raise QueryExecutionError(
                message=f"HTTP error querying Bing for {self.query!r}: {exc}",
                provider_name=self.engine_name,
            ) from exc
        return response

    def _parse_response(self, response: httpx.Response) -> list[SearchResult]:
        try:
            data: Any = response.json()
        except ValueError as exc:
            raise QueryExecutionError(
                message=f"Bing returned a non-JSON response: {exc}",
                provider_name=self.engine_name,
            ) from exc

        try:
            records = data["d"]["results"]
        except (KeyError, TypeError) as exc:
            raise QueryExecutionError(
                message="Bing response has no 'd.results' array",
                provider_name=self.engine_name,
            ) from exc
        if not isinstance(records, list):
            raise QueryExecutionError(
                message=f"Bing 'd.results' is a {type(records).__name__}, expected a list",
                provider_name=self.engine_name,
            )

        results: list[SearchResult] = []
        for position, record in enumerate(records):
            if not isinstance(record, dict):
                raise QueryExecutionError(
                    message=f"Bing result #{position} is not an object",
                    provider_name=self.engine_name,
                )
            results.append(
                SearchResult.from_provider_record(self.query, record, provider_name=self.engine_name)
            )
        return results[: self.max_results]
