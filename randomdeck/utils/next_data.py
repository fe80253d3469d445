"""Next.js page utilities - locate, parse and walk the embedded __NEXT_DATA__ blob."""
import json
import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from bs4 import BeautifulSoup

from randomdeck.constants import MAX_PAYLOAD_PREVIEW_CHARS, NEXT_DATA_RX, NEXT_DATA_SCRIPT_ID
from randomdeck.models.errors import ExtractionFailed, MalformedPayload, SchemaMismatch

logger = logging.getLogger(__name__)


def find_next_data_block(html: str) -> Optional[str]:
    """Return the raw text of the __NEXT_DATA__ script element, if present."""
    if not html:
        return None

    match = NEXT_DATA_RX.search(html)
    if match:
        return match.group(1)

    # Slower path for markup the regex does not anticipate.
    soup = BeautifulSoup(html, "html.parser")
    script = soup.find("script", id=NEXT_DATA_SCRIPT_ID)
    if script is None:
        return None
    return script.string or script.get_text()


def payload_preview(text: str, position: int = 0, limit: int = MAX_PAYLOAD_PREVIEW_CHARS) -> str:
    """Bounded excerpt of ``text`` centred on ``position``."""
    if len(text) <= limit:
        return text
    start = max(0, position - limit // 2)
    end = min(len(text), start + limit)
    start = max(0, end - limit)
    return text[start:end]


def parse_next_data(raw: str, source: str = "") -> Dict[str, Any]:
    """Parse a located __NEXT_DATA__ block.

    Raises:
        MalformedPayload: The block is not valid JSON or is not an object.
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        logger.warning(f"Failed to parse __NEXT_DATA__ from {source or 'page'}: {exc.msg}")
        raise MalformedPayload(
            f"Embedded page data is not valid JSON: {exc.msg} (line {exc.lineno}, column {exc.colno})",
            {
                "source": source,
                "reason": exc.msg,
                "line": exc.lineno,
                "column": exc.colno,
                "preview": payload_preview(exc.doc, exc.pos),
            },
        ) from exc

    if not isinstance(data, dict):
        raise MalformedPayload(
            f"Embedded page data is a {type(data).__name__}, expected an object",
            {"source": source, "preview": payload_preview(raw)},
        )
    return data


def extract_next_data(html: str, source: str = "") -> Dict[str, Any]:
    """Locate and parse the __NEXT_DATA__ payload of a Next.js page.

    Raises:
        ExtractionFailed: The page carries no __NEXT_DATA__ script.
        MalformedPayload: The script content cannot be parsed.
    """
    raw = find_next_data_block(html)
    if raw is None:
        raise ExtractionFailed(
            f"No {NEXT_DATA_SCRIPT_ID} block found in upstream page",
            {"source": source, "marker": NEXT_DATA_SCRIPT_ID},
        )
    return parse_next_data(raw, source)


def resolve_path(data: Any, path: Sequence[str]) -> Any:
    """Follow a sequence of dictionary keys; ``None`` when any hop is missing."""
    node = data
    for key in path:
        if not isinstance(node, dict) or key not in node:
            return None
        node = node[key]
    return node


def format_path(path: Iterable[str]) -> str:
    return ".".join(path)


def find_first_list(data: Any, paths: Sequence[Sequence[str]]) -> Tuple[List[Any], Tuple[str, ...]]:
    """Return the first list found along ``paths`` together with the path that matched.

    Raises:
        SchemaMismatch: None of the paths leads to a list.
    """
    for path in paths:
        value = resolve_path(data, path)
        if isinstance(value, list):
            return value, tuple(path)

    tried = [format_path(path) for path in paths]
    top_level = sorted(data.keys()) if isinstance(data, dict) else []
    raise SchemaMismatch(
        "No known deck list location matched the upstream payload",
        {"tried_paths": tried, "top_level_keys": top_level[:20]},
    )
