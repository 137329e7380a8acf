"""Abstract base class for all document sources."""

import logging
from abc import ABC, abstractmethod
from typing import List

from ..config import AppConfig, SourceConfig
from ..downloader import Downloader
from ..filenames import (file_extension, is_valid_url, remove_duplicates,
                         resolve_url)
from ..models import RunStats

logger = logging.getLogger("haas_scraper")


class BaseSource(ABC):
    name: str = ""

    def __init__(self, config: AppConfig, downloader: Downloader):
        self.config = config
        self.downloader = downloader
        self.source_config: SourceConfig = config.sources.get(
            self.name, SourceConfig()
        )

    @abstractmethod
    def discover(self) -> List[str]:
        """Return candidate document links, in the order found."""
        ...

    def candidates(self) -> List[str]:
        links = self.discover()
        if self.source_config.dedupe:
            links = remove_duplicates(links)
        return links

    def prepare(self, link: str) -> str:
        """Apply the source's link policy. Returns "" if the link is filtered out."""
        link = link.strip()
        if self.source_config.require_pdf_extension and file_extension(link) != ".pdf":
            return ""
        if self.source_config.resolve_relative:
            link = resolve_url(link, self.source_config.base_url)
        if not is_valid_url(link):
            logger.debug(f"[{self.name}] Not a valid URL, skipping: {link!r}")
            return ""
        return link

    def run(self, output_dir: str) -> RunStats:
        """Discover candidates and download them into ``output_dir``."""
        logger.info(f"[{self.name}] Starting discovery...")
        stats = RunStats(source=self.name)
        limit = self.source_config.max_downloads

        links = self.candidates()
        stats.discovered = len(links)
        logger.info(f"[{self.name}] {len(links)} candidate links")

        for link in links:
            if limit is not None and stats.downloaded >= limit:
                logger.info(f"[{self.name}] Reached the maximum download limit of {limit} PDFs, stopping.")
                stats.capped = True
                break

            url = self.prepare(link)
            if not url:
                stats.skipped += 1
                continue

            ok = self.downloader.download_pdf(url, output_dir)
            stats.record(ok, self.downloader.last_download_size)

        logger.info(
            f"[{self.name}] Done: {stats.discovered} discovered, {stats.downloaded} downloaded, "
            f"{stats.skipped} skipped, {stats.failed} failed"
        )
        return stats
