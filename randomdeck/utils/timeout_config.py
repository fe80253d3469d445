"""Centralized timeout configuration so upstream calls can never hang."""
from typing import Optional

import httpx

from randomdeck.constants import BROWSER_HEADERS


def get_upstream_timeout() -> httpx.Timeout:
    """Get an httpx timeout bounded by the configured upstream budget."""
    from config import settings

    return httpx.Timeout(
        settings.upstream_timeout,
        connect=settings.upstream_connect_timeout,
    )


def get_upstream_deadline() -> float:
    """Total seconds one upstream request may take, body included.

    ``httpx.Timeout`` only bounds each connect, read or write on its own, so a
    server trickling bytes would never trip it.
    """
    from config import settings

    return settings.upstream_timeout


def get_relay_deadline() -> float:
    """Total seconds one relay request may take."""
    from config import settings

    # Leave the relay room to report its own upstream timeout.
    return settings.upstream_timeout + settings.upstream_connect_timeout


def get_upstream_client(transport: Optional[httpx.AsyncBaseTransport] = None) -> httpx.AsyncClient:
    """Get an httpx.AsyncClient that looks like a browser to the upstream site."""
    return httpx.AsyncClient(
        timeout=get_upstream_timeout(),
        headers=BROWSER_HEADERS,
        follow_redirects=True,
        trust_env=False,
        transport=transport,
    )


def get_relay_client(base_url: str, transport: Optional[httpx.AsyncBaseTransport] = None) -> httpx.AsyncClient:
    """Get an httpx.AsyncClient for talking to the relay service."""
    from config import settings

    return httpx.AsyncClient(
        base_url=base_url,
        timeout=httpx.Timeout(
            get_relay_deadline(),
            connect=settings.upstream_connect_timeout,
        ),
        transport=transport,
    )
