# Offset based pagination (https://jsonapi.org/format/#fetching-pagination)
#
# We use page[offset] and page[limit], where offset is the number of records to offset by
# prior to returning resources. The response handler signals the collection size with the
# `ResponseAttributes.ATTR_TOTAL_COUNT` response attribute.
#
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional

PAGE_OFFSET_ARG = "page[offset]"
PAGE_LIMIT_ARG = "page[limit]"


def build_page_query(offset: int, limit: int) -> str:
    """
    :return: url query string, e.g. "page[offset]=20&page[limit]=10"
    """
    return f"{PAGE_OFFSET_ARG}={offset}&{PAGE_LIMIT_ARG}={limit}"


@dataclass(frozen=True)
class PaginationWindow:
    """
    offset/limit view over a collection of `total_count` items
    """

    offset: int
    limit: int
    total_count: int

    @classmethod
    def from_args(cls, args: Any, total_count: int) -> Optional["PaginationWindow"]:
        """
        :param args: request query args (werkzeug MultiDict)
        :param total_count: collection size
        :return: the window or None if the request isn't paginated
        """
        offset = args.get(PAGE_OFFSET_ARG, None, type=int)
        limit = args.get(PAGE_LIMIT_ARG, None, type=int)
        if offset is None or limit is None or limit <= 0:
            return None
        return cls(offset, limit, total_count)

    @property
    def last_page_offset(self) -> int:
        """
        The total is rounded half up (not down!) to a multiple of the limit, an exact multiple moves back one page:
        total 95, limit 20 => 100
        total 100, limit 20 => 80
        """
        pages = (Decimal(self.total_count) / Decimal(self.limit)).quantize(Decimal(1), rounding=ROUND_HALF_UP)
        last_page = int(pages) * self.limit
        if last_page == self.total_count:
            last_page = self.total_count - self.limit
        return last_page

    @property
    def prev_offset(self) -> int:
        return self.offset - self.limit

    @property
    def next_offset(self) -> int:
        return self.offset + self.limit

    @property
    def has_prev(self) -> bool:
        return (self.offset - 1) >= 0

    @property
    def has_next(self) -> bool:
        return ((self.total_count - self.limit) - (self.offset + self.limit)) >= 0
