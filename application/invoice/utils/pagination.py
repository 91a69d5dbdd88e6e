"""
Paging primitives and the pagination response headers.

Pages are 0-based. Sort orders come from repeated `sort=property[,asc|desc]`
query parameters.
"""

import math
import re
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence
from urllib.parse import parse_qsl, urlencode

from invoice.config.settings import InvoiceConfigs
configs = InvoiceConfigs()

HEADER_X_TOTAL_COUNT = "X-Total-Count"
HEADER_LINK_FORMAT = '<{uri}>; rel="{rel}"'

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def to_snake_case(name: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", name).lower()


@dataclass(frozen=True)
class Order:
    prop: str
    ascending: bool = True

    @property
    def direction(self) -> str:
        return "ASC" if self.ascending else "DESC"


@dataclass(frozen=True)
class Pageable:
    page: int = 0
    size: int = 20
    sort: List[Order] = field(default_factory=list)

    @property
    def offset(self) -> int:
        return self.page * self.size

    @classmethod
    def of(cls, page: int = 0, size: Optional[int] = None, sort: Optional[Sequence[str]] = None) -> "Pageable":
        size = configs.DEFAULT_PAGE_SIZE if size is None else size
        page = max(page, 0)
        size = min(max(size, 1), configs.MAX_PAGE_SIZE)
        return cls(page=page, size=size, sort=parse_sort(sort or []))


def parse_sort(params: Sequence[str]) -> List[Order]:
    """
    Parse `sort` parameters the way `?sort=date,desc&sort=id` reads:
    every comma-separated token is a property, and a trailing asc/desc
    applies to all properties of that parameter.
    """
    orders: List[Order] = []
    for param in params:
        tokens = [t.strip() for t in param.split(",") if t.strip()]
        if not tokens:
            continue
        ascending = True
        if tokens[-1].lower() in ("asc", "desc"):
            ascending = tokens.pop().lower() == "asc"
        orders.extend(Order(prop=token, ascending=ascending) for token in tokens)
    return orders


@dataclass
class Page:
    content: List[Any]
    pageable: Pageable
    total_elements: int

    @property
    def number(self) -> int:
        return self.pageable.page

    @property
    def size(self) -> int:
        return self.pageable.size

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_elements / self.size) if self.size else 1


def _prepare_page_uri(base_url: str, query: str, page: int, size: int) -> str:
    params = [(k, v) for k, v in parse_qsl(query, keep_blank_values=True) if k not in ("page", "size")]
    params += [("page", str(page)), ("size", str(size))]
    # urlencode percent-encodes ',' and ';' so they cannot break the Link header
    return f"{base_url}?{urlencode(params)}"


def _prepare_link(base_url: str, query: str, page: int, size: int, rel: str) -> str:
    return HEADER_LINK_FORMAT.format(uri=_prepare_page_uri(base_url, query, page, size), rel=rel)


def generate_pagination_headers(base_url: str, query: str, page: Page) -> dict:
    """X-Total-Count plus a Link header with next/prev/last/first relations."""
    number, size = page.number, page.size
    links = []
    if number < page.total_pages - 1:
        links.append(_prepare_link(base_url, query, number + 1, size, "next"))
    if number > 0:
        links.append(_prepare_link(base_url, query, number - 1, size, "prev"))
    last_page = page.total_pages - 1 if page.total_pages > 0 else 0
    links.append(_prepare_link(base_url, query, last_page, size, "last"))
    links.append(_prepare_link(base_url, query, 0, size, "first"))
    return {
        HEADER_X_TOTAL_COUNT: str(page.total_elements),
        "Link": ",".join(links),
    }
