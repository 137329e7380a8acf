"""URL -> local filename normalization and small URL helpers."""

import logging
import re
from typing import Iterable, List
from urllib.parse import urlparse

logger = logging.getLogger("haas_scraper")

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_UNDERSCORES = re.compile(r"_+")
_SAFE_EXT = re.compile(r"\.[a-z0-9]+")

# Removed from the stem in this order. This also eats the letters from
# unrelated words ("my_pdfs" -> "mys"); kept for filename compatibility
# with existing download directories.
INVALID_SUBSTRINGS = ("_pdf", "_zip")


def file_extension(url: str) -> str:
    """Extension of the last path segment, dot included ("" if none)."""
    last = url.rsplit("/", 1)[-1]
    dot = last.rfind(".")
    return last[dot:] if dot >= 0 else ""


def base_name(url: str) -> str:
    """Last path element, ignoring trailing slashes."""
    if not url:
        return "."
    stripped = url.rstrip("/")
    if not stripped:
        return "/"
    return stripped.rsplit("/", 1)[-1]


def url_to_filename(raw_url: str) -> str:
    """Turn a URL into a lowercase, filesystem-safe filename.

    >>> url_to_filename("https://example.com/Docs/Mill Operator's-Manual.PDF")
    'mill_operator_s_manual.pdf'
    """
    lowered = raw_url.lower()

    ext = file_extension(lowered)
    if not _SAFE_EXT.fullmatch(ext):
        ext = ""

    name = _NON_ALNUM.sub("_", base_name(lowered))
    name = _UNDERSCORES.sub("_", name)
    if name.startswith("_"):
        name = name[1:]

    for invalid in INVALID_SUBSTRINGS:
        name = name.replace(invalid, "")

    return name + ext


def remove_duplicates(items: Iterable[str]) -> List[str]:
    """Drop exact duplicates, keeping the first occurrence of each."""
    return list(dict.fromkeys(items))


def is_valid_url(url: str) -> bool:
    """True for an absolute http(s) URL with a host."""
    try:
        parsed = urlparse(url)
        # Accessing .port validates it
        parsed.port
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.hostname)


def get_domain(url: str) -> str:
    try:
        return urlparse(url).hostname or ""
    except ValueError as e:
        logger.warning(f"Could not parse URL {url!r}: {e}")
        return ""


def resolve_url(link: str, base_url: str) -> str:
    """Prefix host-less links with ``base_url``; absolute links pass through.

    Protocol-relative links (``//host/x.pdf``) take the scheme of ``base_url``.
    """
    if link.startswith("//"):
        return f"{urlparse(base_url).scheme or 'https'}:{link}"
    if get_domain(link):
        return link
    base = base_url.rstrip("/")
    if link.startswith("/"):
        return base + link
    return f"{base}/{link}"
