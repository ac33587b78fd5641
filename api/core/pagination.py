"""
Page-window arithmetic for listing endpoints.

Out-of-range page requests never fail: the requested page is clamped to the
nearest valid one. An empty collection still has exactly one (empty) page.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Any

DEFAULT_PAGE_SIZE = 10


@dataclass(frozen=True)
class PageWindow:
    page_number: int
    total_pages: int
    page_size: int
    total_count: int
    records: list[dict[str, Any]] = field(default_factory=list)

    @property
    def offset(self) -> int:
        return (self.page_number - 1) * self.page_size

    def with_records(self, records: list[dict[str, Any]]) -> PageWindow:
        return replace(self, records=list(records))

    def to_response(self, collection_key: str, base_path: str) -> dict[str, Any]:
        return {
            collection_key: self.records,
            "pageNumber": self.page_number,
            "totalPages": self.total_pages,
            "pageSize": self.page_size,
            "totalCount": self.total_count,
            "links": build_page_links(self, base_path),
        }


def compute_window(
    requested_page: int,
    total_count: int,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> PageWindow:
    if page_size < 1:
        raise ValueError("page_size must be at least 1.")

    total_count = max(int(total_count), 0)
    total_pages = max(math.ceil(total_count / page_size), 1)

    page = int(requested_page)
    page = 1 if page < 1 else page
    page = total_pages if page > total_pages else page

    return PageWindow(
        page_number=page,
        total_pages=total_pages,
        page_size=page_size,
        total_count=total_count,
    )


def build_page_links(window: PageWindow, base_path: str) -> dict[str, str]:
    links: dict[str, str] = {}
    if window.page_number < window.total_pages:
        links["nextPage"] = f"{base_path}?page={window.page_number + 1}"
        links["lastPage"] = f"{base_path}?page={window.total_pages}"
    if window.page_number > 1:
        links["prevPage"] = f"{base_path}?page={window.page_number - 1}"
        links["firstPage"] = f"{base_path}?page=1"
    return links
