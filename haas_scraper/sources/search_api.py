"""Haas site search API: JSON result set of document paths."""

import logging
from typing import List, Sequence
from urllib.parse import quote

from ..extractor import extract_json_paths
from .base import BaseSource

logger = logging.getLogger("haas_scraper")


def build_search_url(endpoint: str, doc_type: str, content_types: Sequence[str],
                     count: int) -> str:
    """Build a search request URL filtering on one or more content types.

    >>> build_search_url("https://h/search.json", "diy", ["Instruction Manual", "Reference"], 5000)
    'https://h/search.json?type=diy&q=%5Bsearch.contentType%3A%20%22Instruction%20Manual%22%20%7C%7C%20%22Reference%22%5D&count=5000'
    """
    filter_expr = " || ".join(f'"{ct}"' for ct in content_types)
    query = f"[search.contentType: {filter_expr}]"
    return f"{endpoint}?type={quote(doc_type, safe='')}&q={quote(query, safe='')}&count={count}"


class SearchAPISource(BaseSource):
    name = "search_api"

    def discover(self) -> List[str]:
        paths = []
        for q in self.source_config.queries:
            url = build_search_url(self.source_config.endpoint, q.type, q.content_types, q.count)
            body = self.downloader.fetch_text(url)
            found = extract_json_paths(body)
            logger.info(f"[{self.name}] {len(found)} paths for content types {q.content_types}")
            paths.extend(found)
        return paths
