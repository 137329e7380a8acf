"""CLI entry point and orchestrator."""

import argparse
import logging
import os
from typing import Dict, Optional

from .config import AppConfig, load_config
from .downloader import Downloader
from .logger import setup_logger
from .models import RunStats
from .sources import ALL_SOURCES

logger = logging.getLogger("haas_scraper")


def ensure_output_dir(path: str, mode: int = 0o755) -> bool:
    """Create the output directory if it is missing. Failure is only logged."""
    if os.path.isdir(path):
        return True
    try:
        os.makedirs(path, mode=mode, exist_ok=True)
    except OSError as e:
        logger.error(f"Failed to create output directory {path}: {e}")
        return False
    return True


def run_scraper(config: AppConfig, downloader: Downloader,
                source_name: Optional[str] = None) -> Dict[str, RunStats]:
    """Run every enabled source in order, downloading into ``config.output_dir``."""
    ensure_output_dir(config.output_dir, config.dir_mode)

    if source_name:
        sources_to_run = {source_name: ALL_SOURCES[source_name]}
    else:
        sources_to_run = ALL_SOURCES

    results = {}
    for name, source_cls in sources_to_run.items():
        src_config = config.sources.get(name)
        if src_config and not src_config.enabled:
            logger.info(f"[{name}] Disabled in config, skipping.")
            continue

        print(f"\n{'='*60}")
        print(f"  Source: {name}")
        print(f"{'='*60}")

        source = source_cls(config, downloader)
        results[name] = source.run(config.output_dir)

    return results


def show_stats(results: Dict[str, RunStats]):
    """Display per-source download statistics for this run."""
    print("\n" + "=" * 70)
    print("  DOWNLOAD STATISTICS")
    print("=" * 70)
    print(f"{'Source':<14} {'Found':>7} {'Downloaded':>11} {'Skipped':>8} {'Failed':>7} {'Size':>14}")
    print("-" * 70)

    total = RunStats(source="TOTAL")
    for name, stats in results.items():
        note = "  (cap reached)" if stats.capped else ""
        print(f"{name:<14} {stats.discovered:>7} {stats.downloaded:>11} {stats.skipped:>8} "
              f"{stats.failed:>7} {_format_bytes(stats.bytes_downloaded):>14}{note}")
        total.discovered += stats.discovered
        total.downloaded += stats.downloaded
        total.skipped += stats.skipped
        total.failed += stats.failed
        total.bytes_downloaded += stats.bytes_downloaded

    print("-" * 70)
    print(f"{'TOTAL':<14} {total.discovered:>7} {total.downloaded:>11} {total.skipped:>8} "
          f"{total.failed:>7} {_format_bytes(total.bytes_downloaded):>14}")
    print()


def _format_bytes(n: int) -> str:
    if n < 1024:
        return f"{n} B"
    elif n < 1024 ** 2:
        return f"{n / 1024:.1f} KB"
    elif n < 1024 ** 3:
        return f"{n / 1024 ** 2:.1f} MB"
    else:
        return f"{n / 1024 ** 3:.2f} GB"


def main(argv=None):
    parser = argparse.ArgumentParser(description="Haas CNC manual downloader")
    parser.add_argument("--source", type=str, default=None,
                        choices=list(ALL_SOURCES.keys()),
                        help="Run a single source instead of all")
    parser.add_argument("--config", type=str, default=None,
                        help="Path to config file (default: config.yaml if present)")
    parser.add_argument("--output-dir", type=str, default=None,
                        help="Directory to store downloaded PDFs")
    parser.add_argument("--list-sources", action="store_true",
                        help="List configured sources and exit")
    args = parser.parse_args(argv)

    config = load_config(args.config)
    if args.output_dir:
        config.output_dir = args.output_dir
    setup_logger(config.log_dir, config.log_level)

    if args.list_sources:
        for name in ALL_SOURCES:
            src = config.sources.get(name)
            state = "enabled" if src is None or src.enabled else "disabled"
            print(f"{name:<14} {state:<9} {src.description if src else ''}")
        return

    print("Haas CNC Manual Downloader")
    print(f"Output directory: {config.output_dir}")

    with Downloader(config) as downloader:
        results = run_scraper(config, downloader, args.source)
    show_stats(results)


if __name__ == "__main__":
    main()
