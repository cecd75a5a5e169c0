"""
PerkHub — Perk Query Service Client
=====================================

What:  Async HTTP client the search view uses to call GET /perks/all.
How:   Wraps httpx.AsyncClient. Every failure (transport error, non-2xx,
       body that is not a perk list) comes out as PerkFetchError whose
       message is the server's `message` field when there is one.
"""

import logging
from typing import List, Mapping, Optional

import httpx

from perkhub.config import settings
from perkhub.exceptions import PerkFetchError
from perkhub.schemas.perk import PerkListResponse, PerkRead

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> Optional[str]:
    """The `message` field of an error body, if the body is JSON and has one."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, str) and message.strip():
            return message
    return None


class PerkApiClient:
    """
    HTTP client for the Perk Query Service.

    Args:
        base_url:  API root including the /api prefix (default PERKHUB_API_URL)
        timeout:   total request timeout in seconds (default CLIENT_TIMEOUT)
        transport: optional httpx transport (ASGITransport, MockTransport)

    Usable as an async context manager; aclose() releases the pool.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.perkhub_api_url).rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout if timeout is not None else settings.client_timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def list_all_perks(self, params: Optional[Mapping[str, str]] = None) -> List[PerkRead]:
        """
        GET /perks/all with the given query parameters.

        Returns:
            The `perks` list from the response body.

        Raises:
            PerkFetchError: on any failure; never anything else.
        """
        try:
            response = await self._client.get("/perks/all", params=dict(params or {}))
        except httpx.HTTPError as exc:
            logger.warning("GET /perks/all failed before a response: %s", exc)
            raise PerkFetchError(context={"error_type": type(exc).__name__}) from exc

        if response.is_error:
            raise PerkFetchError(
                _error_message(response),
                status_code=response.status_code,
                context={"request_id": response.headers.get("X-Request-ID")},
            )

        try:
            return PerkListResponse.model_validate(response.json()).perks
        except ValueError as exc:
            # json.JSONDecodeError and pydantic.ValidationError are both ValueErrors
            logger.warning("GET /perks/all returned an unreadable body: %s", exc)
            raise PerkFetchError(
                status_code=response.status_code,
                context={"error_type": type(exc).__name__},
            ) from exc

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "PerkApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
