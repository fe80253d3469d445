import asyncio
import json
import sys
from contextlib import asynccontextmanager
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app import app


def make_folder_page(payload, script_attrs='id="__NEXT_DATA__" type="application/json"') -> str:
    """Minimal Next.js page embedding ``payload`` the way Archidekt does."""
    body = payload if isinstance(payload, str) else json.dumps(payload)
    return (
        "<!DOCTYPE html><html><head><title>Folder | Archidekt</title></head>"
        '<body><div id="__next"></div>'
        f"<script {script_attrs}>{body}</script>"
        "</body></html>"
    )


@asynccontextmanager
async def trickle_server(interval: float = 0.2):
    """Local HTTP server that sends headers at once, then one body byte per ``interval``."""
    handlers = []

    async def handle(reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
        handlers.append(asyncio.current_task())
        try:
            await reader.readuntil(b"\r\n\r\n")
            writer.write(b"HTTP/1.1 200 OK\r\nContent-Type: text/html\r\nContent-Length: 1000\r\n\r\n")
            for _ in range(1000):
                await writer.drain()
                await asyncio.sleep(interval)
                writer.write(b" ")
        except (ConnectionError, asyncio.IncompleteReadError):
            pass
        finally:
            writer.close()

    server = await asyncio.start_server(handle, "127.0.0.1", 0)
    port = server.sockets[0].getsockname()[1]
    try:
        yield f"http://127.0.0.1:{port}"
    finally:
        for task in handlers:
            task.cancel()
        server.close()
        await server.wait_closed()


@pytest.fixture(scope="session")
def client():
    """Shared TestClient for FastAPI app."""
    return TestClient(app)


@pytest.fixture()
def folder_page():
    return make_folder_page


@pytest.fixture()
def raw_decks() -> list:
    """Upstream deck records as they appear in a folder payload."""
    return [
        {"id": 101, "name": "Atraxa Superfriends", "edhBracket": 3, "colors": {"W": 10, "U": 8, "B": 6, "R": 0, "G": 9}},
        {"id": 102, "name": "Krenko Goblins", "bracket": "2"},
        {"id": 103, "name": "Unsorted Brew"},
        {"id": 104, "name": "Kinnan Turbo", "edh_bracket": "4", "colorIdentity": ["Green", "Blue"]},
    ]


@pytest.fixture()
def slow_server():
    return trickle_server
