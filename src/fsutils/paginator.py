"""In-memory pagination over an ordered key/value collection."""

from __future__ import annotations

from collections.abc import Mapping
from itertools import islice
from typing import Any, Iterator, Sequence, Union

Collection = Union[Mapping[Any, Any], Sequence[Any]]


class ArrayPaginator:
    """
    One page of a caller-owned collection plus page-navigation queries.

    The collection is a mapping (keys kept) or a sequence (keys are indices). It is
    never copied or mutated; all queries are computed from (collection, page,
    limit) at call time. page and limit are not validated.

    Page arithmetic, kept for compatibility with existing callers:
    - the page slice starts at offset page * limit;
    - the next page wraps to 1 once page reaches the last page (or beyond);
    - the previous page is page - 1 with no upper bound.

    With the defaults (page=1, limit=10) the slice starts at offset 10, so a
    collection of 10 items or fewer yields an empty page. Pages <= 0 are always
    empty, so the first limit items are never part of any page.
    """

    def __init__(self, collection: Collection, page: int = 1, limit: int = 10) -> None:
        self._collection = collection
        self._page = page
        self._limit = limit

    @classmethod
    def paginate(cls, collection: Collection, page: int = 1, limit: int = 10) -> ArrayPaginator:
        return cls(collection, page, limit)

    @property
    def collection(self) -> Collection:
        return self._collection

    @property
    def page(self) -> int:
        return self._page

    @property
    def limit(self) -> int:
        return self._limit

    def _pairs(self) -> Iterator[tuple[Any, Any]]:
        if isinstance(self._collection, Mapping):
            return iter(self._collection.items())
        return enumerate(self._collection)

    def count(self) -> int:
        """Number of entries in the whole collection (not in the page)."""
        return len(self._collection)

    def __len__(self) -> int:
        return self.count()

    def page_count(self) -> int:
        """Number of pages of size limit; 0 for an empty collection or a non-positive limit."""
        n = self.count()
        if n == 0 or self._limit <= 0:
            return 0
        return -(-n // self._limit)

    def iterate(self) -> Iterator[tuple[Any, Any]]:
        """Lazily yield the (key, value) pairs of the current page in collection order."""
        if self._limit <= 0 or self._page <= 0:
            return iter(())
        offset = self._page * self._limit
        return islice(self._pairs(), offset, offset + self._limit)

    def __iter__(self) -> Iterator[tuple[Any, Any]]:
        return self.iterate()

    def items(self) -> list[tuple[Any, Any]]:
        """The current page as a list of (key, value) pairs."""
        return list(self.iterate())

    def get_current_page_number(self) -> int:
        return self._page

    def get_next_page_number(self) -> int:
        """page + 1 while pages remain, 1 at or past the last page, -1 for an empty collection."""
        if self.count() == 0:
            return -1
        if self._page < self.page_count():
            return self._page + 1
        return 1

    def get_previous_page_number(self) -> int:
        """page - 1 when page > 1, else 0."""
        if self._page > 1:
            return self._page - 1
        return 0

    def is_next_page(self) -> bool:
        return self.count() > 0 and self._page < self.page_count()

    def is_previous_page(self) -> bool:
        return self._page > 1

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(count={self.count()}, page={self._page}, "
            f"limit={self._limit})"
        )
