"""Deck sources the selector can read from: the relay over HTTP, or in-process."""
import asyncio
import logging
from typing import Any, List, Optional, Protocol

import httpx
from pydantic import ValidationError

from randomdeck.models import (
    FolderDecksResponse,
    MalformedPayload,
    RelayDeck,
    UpstreamUnavailable,
    error_from_payload,
)
from randomdeck.services import archidekt
from randomdeck.utils.timeout_config import get_relay_client, get_relay_deadline

logger = logging.getLogger(__name__)


class DeckSource(Protocol):
    async def fetch_folder(self, folder_id: str) -> List[RelayDeck]:
        ...


class LocalRelay:
    """Calls the relay service functions directly, without an HTTP hop."""

    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        self.client = client

    async def fetch_folder(self, folder_id: str) -> List[RelayDeck]:
        return await archidekt.fetch_folder(folder_id, self.client)


class RelayClient:
    """HTTP client for a deployed relay.

    Error responses are turned back into the matching ``RelayError`` subclass
    using the ``kind`` field of the body.
    """

    def __init__(self, base_url: str, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self.transport = transport

    async def _send(self, path: str) -> httpx.Response:
        async with get_relay_client(self.base_url, self.transport) as client:
            return await client.get(path)

    async def _get(self, path: str) -> Any:
        logger.info(f"Relay GET {self.base_url}{path}")
        try:
            response = await asyncio.wait_for(self._send(path), timeout=get_relay_deadline())
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            raise UpstreamUnavailable(
                f"Relay request timed out ({path})", details={"relay": self.base_url}, status_code=504
            ) from exc
        except httpx.RequestError as exc:
            raise UpstreamUnavailable(
                f"Relay request failed ({path}): {exc.__class__.__name__}", details={"relay": self.base_url}
            ) from exc

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if response.is_error:
            raise error_from_payload(response.status_code, payload)
        if payload is None:
            raise UpstreamUnavailable(
                f"Relay returned a non-JSON body ({path})",
                upstream_status=response.status_code,
                details={"relay": self.base_url},
            )
        return payload

    async def fetch_folder(self, folder_id: str) -> List[RelayDeck]:
        payload = await self._get(f"/api/folders/{folder_id}")
        try:
            return FolderDecksResponse.model_validate(payload).decks
        except ValidationError as exc:
            raise MalformedPayload(
                f"Relay folder response has an unexpected shape ({folder_id})",
                {"relay": self.base_url, "errors": exc.error_count()},
            ) from exc

    async def fetch_deck(self, deck_id: str) -> Any:
        return await self._get(f"/api/decks/{deck_id}")
