"""Source registry, in run order."""

from .html_pages import HTMLPagesSource
from .search_api import SearchAPISource

ALL_SOURCES = {
    "search_api": SearchAPISource,
    "html_pages": HTMLPagesSource,
}
