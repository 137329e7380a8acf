"""Shared fixtures: temp config and a Downloader backed by httpx.MockTransport."""

import httpx
import pytest

from haas_scraper.config import AppConfig
from haas_scraper.downloader import Downloader

PDF_BYTES = b"%PDF-1.4\n%fake\n"


def pdf_response(content: bytes = PDF_BYTES, content_type: str = "application/pdf") -> httpx.Response:
    return httpx.Response(200, headers={"Content-Type": content_type}, content=content)


@pytest.fixture
def config(tmp_path) -> AppConfig:
    cfg = AppConfig()
    cfg.output_dir = str(tmp_path / "PDFs")
    cfg.log_dir = str(tmp_path / "logs")
    return cfg


@pytest.fixture
def make_downloader(config):
    """Build a Downloader whose requests are answered by ``handler``."""
    created = []

    def factory(handler) -> Downloader:
        dl = Downloader(config, transport=httpx.MockTransport(handler))
        created.append(dl)
        return dl

    yield factory

    for dl in created:
        dl.close()
