import json
import os

import httpx

from conftest import pdf_response
from haas_scraper.config import SearchQuery
from haas_scraper.sources import ALL_SOURCES
from haas_scraper.sources.html_pages import HTMLPagesSource
from haas_scraper.sources.search_api import SearchAPISource, build_search_url

SEARCH_PATH = "/bin/haascnc/search.json"


def search_payload(paths):
    return json.dumps({"result": {"webPages": [{"path": p} for p in paths]}})


def test_registry_runs_search_before_pages():
    assert list(ALL_SOURCES) == ["search_api", "html_pages"]


def test_build_search_url_encodes_content_type_filter():
    url = build_search_url("https://www.haascnc.com/bin/haascnc/search.json", "diy",
                           ["Instruction Manual", "Reference"], 5000)
    assert url == (
        "https://www.haascnc.com/bin/haascnc/search.json?type=diy"
        "&q=%5Bsearch.contentType%3A%20%22Instruction%20Manual%22%20%7C%7C%20%22Reference%22%5D"
        "&count=5000"
    )


def test_search_stops_after_ten_downloads(config, make_downloader):
    candidates = [f"https://www.haascnc.com/docs/manual-{i}.pdf" for i in range(15)]
    requests = []

    def handler(request):
        requests.append(str(request.url))
        if request.url.path == SEARCH_PATH:
            return httpx.Response(200, text=search_payload(candidates))
        return pdf_response()

    os.makedirs(config.output_dir)
    stats = SearchAPISource(config, make_downloader(handler)).run(config.output_dir)

    assert len(os.listdir(config.output_dir)) == 10
    assert stats.downloaded == 10
    assert stats.capped is True
    # one search request, then exactly ten downloads
    assert len(requests) == 11
    assert requests[-1] == candidates[9]


def test_search_sends_configured_query(config, make_downloader):
    seen = []

    def handler(request):
        seen.append(request.url.params)
        return httpx.Response(200, text=search_payload([]))

    SearchAPISource(config, make_downloader(handler)).run(config.output_dir)

    assert seen[0]["type"] == "diy"
    assert seen[0]["q"] == '[search.contentType: "Instruction Manual" || "Reference"]'
    assert seen[0]["count"] == "5000"


def test_search_combines_queries_and_dedupes(config, make_downloader):
    config.sources["search_api"].queries = [
        SearchQuery(type="diy", content_types=["Instruction Manual"], count=10),
        SearchQuery(type="diy", content_types=["Reference"], count=10),
    ]

    def handler(request):
        if request.url.params["q"] == '[search.contentType: "Instruction Manual"]':
            return httpx.Response(200, text=search_payload(["https://x.com/a.pdf", "https://x.com/b.pdf"]))
        return httpx.Response(200, text=search_payload(["https://x.com/b.pdf", "https://x.com/c.pdf"]))

    source = SearchAPISource(config, make_downloader(handler))
    assert source.candidates() == ["https://x.com/a.pdf", "https://x.com/b.pdf", "https://x.com/c.pdf"]


def test_search_filters_candidates(config, make_downloader):
    downloads = []

    def handler(request):
        if request.url.path == SEARCH_PATH:
            return httpx.Response(200, text=search_payload([
                "https://x.com/page.html",
                "/relative/only.pdf",
                "  https://x.com/padded.pdf  ",
                "https://x.com/padded.pdf",
                "",
            ]))
        downloads.append(str(request.url))
        return pdf_response()

    os.makedirs(config.output_dir)
    stats = SearchAPISource(config, make_downloader(handler)).run(config.output_dir)

    assert downloads == ["https://x.com/padded.pdf"]
    assert stats.discovered == 5
    assert stats.skipped == 3
    assert stats.downloaded == 1
    # the untrimmed duplicate survives dedupe but finds the file already there
    assert stats.failed == 1


def test_search_api_failure_yields_no_candidates(config, make_downloader):
    source = SearchAPISource(config, make_downloader(lambda request: httpx.Response(503)))
    stats = source.run(config.output_dir)
    assert stats.discovered == 0
    assert stats.downloaded == 0


def test_html_pages_resolve_relative_links_without_dedupe(config, make_downloader):
    page = config.sources["html_pages"].pages[0]
    html = (
        '<a href="/docs/x.pdf">X</a>'
        '<a href=" https://cdn.example.org/y.pdf">Y</a>'
        '<a href="/docs/x.pdf">X again</a>'
    )
    downloads = []

    def handler(request):
        if str(request.url) == page:
            return httpx.Response(200, text=html)
        downloads.append(str(request.url))
        return pdf_response()

    os.makedirs(config.output_dir)
    stats = HTMLPagesSource(config, make_downloader(handler)).run(config.output_dir)

    assert downloads == ["https://www.haascnc.com/docs/x.pdf", "https://cdn.example.org/y.pdf"]
    assert stats.discovered == 3
    assert stats.downloaded == 2
    assert stats.failed == 1
    assert stats.capped is False
    assert sorted(os.listdir(config.output_dir)) == ["x.pdf", "y.pdf"]


def test_html_pages_failures_continue(config, make_downloader):
    config.sources["html_pages"].pages = ["https://www.haascnc.com/missing.html",
                                          "https://www.haascnc.com/ok.html"]

    def handler(request):
        if request.url.path == "/missing.html":
            return httpx.Response(404)
        if request.url.path == "/ok.html":
            return httpx.Response(200, text='<a href="/a.pdf"></a><a href="/b.pdf"></a>')
        if request.url.path == "/a.pdf":
            return pdf_response(b"<html/>", "text/html")
        return pdf_response()

    os.makedirs(config.output_dir)
    stats = HTMLPagesSource(config, make_downloader(handler)).run(config.output_dir)

    assert stats.failed == 1
    assert stats.downloaded == 1
    assert os.listdir(config.output_dir) == ["b.pdf"]


def test_html_pages_cap_is_configurable(config, make_downloader):
    config.sources["html_pages"].max_downloads = 1
    page = config.sources["html_pages"].pages[0]

    def handler(request):
        if str(request.url) == page:
            return httpx.Response(200, text='<a href="/a.pdf"></a><a href="/b.pdf"></a>')
        return pdf_response()

    os.makedirs(config.output_dir)
    stats = HTMLPagesSource(config, make_downloader(handler)).run(config.output_dir)

    assert stats.downloaded == 1
    assert stats.capped is True


def test_zero_cap_downloads_nothing(config, make_downloader):
    config.sources["html_pages"].max_downloads = 0
    page = config.sources["html_pages"].pages[0]
    downloads = []

    def handler(request):
        if str(request.url) == page:
            return httpx.Response(200, text='<a href="/a.pdf"></a><a href="/b.pdf"></a>')
        downloads.append(str(request.url))
        return pdf_response()

    os.makedirs(config.output_dir)
    stats = HTMLPagesSource(config, make_downloader(handler)).run(config.output_dir)

    assert downloads == []
    assert stats.downloaded == 0
    assert stats.capped is True
    assert os.listdir(config.output_dir) == []


def test_bytes_downloaded_counts_written_bodies(config, make_downloader):
    page = config.sources["html_pages"].pages[0]

    def handler(request):
        if str(request.url) == page:
            return httpx.Response(200, text='<a href="/a.pdf"></a><a href="/b.pdf"></a>')
        if request.url.path == "/a.pdf":
            return pdf_response(b"%PDF-1234")
        return pdf_response(b"<html/>", "text/html")

    os.makedirs(config.output_dir)
    stats = HTMLPagesSource(config, make_downloader(handler)).run(config.output_dir)

    assert stats.downloaded == 1
    assert stats.bytes_downloaded == len(b"%PDF-1234")
