"""YAML config loader."""

import copy
import os
from dataclasses import dataclass, field, fields, replace
from typing import Dict, List, Optional

import yaml

DEFAULT_CONFIG_PATH = "config.yaml"


@dataclass
class DownloadConfig:
    timeout: int = 180  # PDF downloads
    page_timeout: int = 30  # API and HTML page fetches
    connect_timeout: int = 30
    user_agent: str = "MyPDFDownloader/1.0 (+https://example.com)"


@dataclass
class SearchQuery:
    type: str = "diy"
    content_types: List[str] = field(default_factory=lambda: ["Instruction Manual", "Reference"])
    count: int = 5000


@dataclass
class SourceConfig:
    enabled: bool = True
    description: str = ""
    endpoint: str = ""
    base_url: str = "https://www.haascnc.com"
    pages: List[str] = field(default_factory=list)
    queries: List[SearchQuery] = field(default_factory=list)
    # Download policy
    max_downloads: Optional[int] = None
    dedupe: bool = False
    require_pdf_extension: bool = False
    resolve_relative: bool = False


DEFAULT_SOURCES: Dict[str, SourceConfig] = {
    "search_api": SourceConfig(
        description="Haas search API (instruction manuals and references)",
        endpoint="https://www.haascnc.com/bin/haascnc/search.json",
        queries=[SearchQuery()],
        max_downloads=10,
        dedupe=True,
        require_pdf_extension=True,
    ),
    "html_pages": SourceConfig(
        description="Haas owner pages scraped for PDF links",
        pages=["https://www.haascnc.com/owners/Service/operators-manual.html"],
        resolve_relative=True,
    ),
}


@dataclass
class AppConfig:
    output_dir: str = "PDFs"
    dir_mode: int = 0o755
    log_dir: str = "logs"
    log_level: str = "INFO"
    download: DownloadConfig = field(default_factory=DownloadConfig)
    sources: Dict[str, SourceConfig] = field(
        default_factory=lambda: copy.deepcopy(DEFAULT_SOURCES)
    )


def _known(cls, raw: dict) -> dict:
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in (raw or {}).items() if k in names}


def _source_config(name: str, raw: dict) -> SourceConfig:
    values = _known(SourceConfig, raw)
    if "queries" in values:
        values["queries"] = [SearchQuery(**_known(SearchQuery, q)) for q in values["queries"] or []]
    base = copy.deepcopy(DEFAULT_SOURCES.get(name, SourceConfig()))
    return replace(base, **values)


def load_config(config_path: Optional[str] = None) -> AppConfig:
    """Load config from YAML, layered over the built-in defaults.

    With no explicit path, a missing ``config.yaml`` falls back to defaults.
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH
        if not os.path.exists(config_path):
            return AppConfig()

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    download = DownloadConfig(**_known(DownloadConfig, raw.get("download")))

    sources = copy.deepcopy(DEFAULT_SOURCES)
    for name, src_raw in (raw.get("sources") or {}).items():
        sources[name] = _source_config(name, src_raw)

    dir_mode = raw.get("dir_mode", 0o755)
    if isinstance(dir_mode, str):
        dir_mode = int(dir_mode, 8)

    return AppConfig(
        output_dir=raw.get("output_dir", "PDFs"),
        dir_mode=dir_mode,
        log_dir=raw.get("log_dir", "logs"),
        log_level=raw.get("log_level", "INFO"),
        download=download,
        sources=sources,
    )
