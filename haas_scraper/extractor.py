"""Candidate link extraction: search API JSON and raw HTML."""

import json
import logging
import re
from typing import List

logger = logging.getLogger("haas_scraper")

PDF_HREF_PATTERN = re.compile(r'href="([^"]+\.pdf)"')


def extract_json_paths(json_text: str) -> List[str]:
    """Return every ``result.webPages[].path`` in document order.

    Malformed or unexpected payloads are logged and give an empty list.
    """
    try:
        parsed = json.loads(json_text)
    except (json.JSONDecodeError, TypeError) as e:
        logger.error(f"Failed to parse JSON: {e}")
        return []

    try:
        pages = (parsed.get("result") or {}).get("webPages") or []
        # null records and null paths read as ""
        paths = [(page or {}).get("path") for page in pages]
        paths = ["" if p is None else p for p in paths]
    except AttributeError as e:
        logger.error(f"Unexpected search response shape: {e}")
        return []

    if not all(isinstance(p, str) for p in paths):
        logger.error("Unexpected search response shape: non-string path")
        return []
    return paths


def extract_pdf_links(html: str) -> List[str]:
    """All ``href="....pdf"`` targets, in order of appearance."""
    return PDF_HREF_PATTERN.findall(html or "")
