"""Data models for the scraper."""

from dataclasses import dataclass


@dataclass
class RunStats:
    """Per-source counters for a single run. Nothing here is persisted."""
    source: str
    discovered: int = 0
    downloaded: int = 0
    skipped: int = 0  # filtered out before any request
    failed: int = 0  # request made (or file existed), nothing written
    bytes_downloaded: int = 0
    capped: bool = False

    def record(self, ok: bool, size: int = 0):
        if ok:
            self.downloaded += 1
            self.bytes_downloaded += size
        else:
            self.failed += 1
