"""Public Haas pages scraped for linked PDFs."""

import logging
from typing import List

from ..extractor import extract_pdf_links
from .base import BaseSource

logger = logging.getLogger("haas_scraper")


class HTMLPagesSource(BaseSource):
    name = "html_pages"

    def discover(self) -> List[str]:
        links = []
        for page_url in self.source_config.pages:
            html = self.downloader.fetch_text(page_url)
            if not html:
                continue
            logger.info(f"[{self.name}] Fetched content from: {page_url}")
            links.extend(extract_pdf_links(html))
        return links
