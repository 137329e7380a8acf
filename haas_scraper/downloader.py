"""HTTP fetch + PDF download over a single httpx client. No retries."""

import logging
import os
import time
from typing import Optional, Tuple

import httpx

from .config import AppConfig
from .filenames import is_valid_url, url_to_filename

logger = logging.getLogger("haas_scraper")

PDF_CONTENT_TYPE = "application/pdf"

# Request construction problems (bad URL, unsupported scheme) plus transport errors
REQUEST_ERRORS = (httpx.HTTPError, httpx.InvalidURL)


class DeadlineExceeded(Exception):
    """The whole request took longer than its time budget."""


class Downloader:
    def __init__(self, config: AppConfig, transport: Optional[httpx.BaseTransport] = None):
        self.config = config
        self._transport = transport
        self._client: Optional[httpx.Client] = None
        # Size of the most recent successful download_pdf call
        self.last_download_size = 0

    @property
    def client(self) -> httpx.Client:
        if self._client is None or self._client.is_closed:
            self._client = httpx.Client(
                timeout=httpx.Timeout(self.config.download.timeout,
                                      connect=self.config.download.connect_timeout),
                follow_redirects=True,
                headers={"User-Agent": self.config.download.user_agent},
                transport=self._transport,
            )
        return self._client

    def close(self):
        if self._client and not self._client.is_closed:
            self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def _get(self, url: str, budget: float) -> Tuple[httpx.Response, bytes]:
        """GET ``url`` and buffer the body, all within ``budget`` seconds.

        The httpx timeout bounds each connect/read step; the deadline bounds
        the request as a whole.
        """
        deadline = time.monotonic() + budget
        timeout = httpx.Timeout(budget, connect=min(self.config.download.connect_timeout, budget))

        with self.client.stream("GET", url, timeout=timeout) as resp:
            if resp.status_code != httpx.codes.OK:
                return resp, b""

            chunks = []
            for chunk in resp.iter_bytes():
                chunks.append(chunk)
                if time.monotonic() > deadline:
                    raise DeadlineExceeded(f"exceeded {budget}s time limit")
        return resp, b"".join(chunks)

    def fetch_text(self, url: str) -> str:
        """GET a page or API response body. Returns "" on any failure."""
        if not is_valid_url(url):
            logger.error(f"Failed to build request, invalid URL: {url!r}")
            return ""

        try:
            resp, body = self._get(url, self.config.download.page_timeout)
        except REQUEST_ERRORS + (DeadlineExceeded,) as e:
            logger.error(f"Failed to GET {url}: {e}")
            return ""

        if resp.status_code != httpx.codes.OK:
            logger.error(f"Non-OK HTTP status for {url}: {resp.status_code} {resp.reason_phrase}")
            return ""

        try:
            return body.decode(resp.encoding or "utf-8")
        except (UnicodeDecodeError, LookupError) as e:
            logger.error(f"Failed to decode response body from {url}: {e}")
            return ""

    def download_pdf(self, url: str, output_dir: str) -> bool:
        """Download one PDF into ``output_dir``.

        The whole body is read into memory before the destination file is
        created, so a failed transfer never leaves a partial file behind.
        An existing file is never overwritten. Returns True only once the
        bytes are on disk.
        """
        self.last_download_size = 0
        if not is_valid_url(url):
            logger.error(f"Failed to build request, invalid URL: {url!r}")
            return False

        filename = url_to_filename(url)
        if not filename:
            logger.warning(f"Could not derive a filename from {url}, skipping")
            return False

        file_path = os.path.join(output_dir, filename)
        if os.path.isfile(file_path):
            logger.info(f"File already exists, skipping: {file_path}")
            return False

        try:
            resp, body = self._get(url, self.config.download.timeout)
        except REQUEST_ERRORS + (DeadlineExceeded,) as e:
            logger.error(f"Failed to download {url}: {e}")
            return False

        if resp.status_code != httpx.codes.OK:
            logger.error(f"Download failed for {url}: {resp.status_code} {resp.reason_phrase}")
            return False

        content_type = resp.headers.get("content-type", "")
        if PDF_CONTENT_TYPE not in content_type:
            logger.error(f"Invalid content type for {url}: {content_type!r} (expected {PDF_CONTENT_TYPE})")
            return False

        if not body:
            logger.error(f"Downloaded 0 bytes for {url}; not creating file")
            return False

        if not self._write_file(url, file_path, body):
            return False
        self.last_download_size = len(body)
        return True

    def _write_file(self, url: str, file_path: str, body: bytes) -> bool:
        try:
            f = open(file_path, "xb")
        except OSError as e:
            logger.error(f"Failed to create file for {url}: {e}")
            return False

        try:
            with f:
                f.write(body)
        except OSError as e:
            logger.error(f"Failed to write PDF to file for {url}: {e}")
            try:
                os.remove(file_path)
            except OSError:
                logger.warning(f"Could not remove partial file {file_path}")
            return False

        logger.info(f"Downloaded {len(body):,} bytes: {url} -> {file_path}")
        return True
