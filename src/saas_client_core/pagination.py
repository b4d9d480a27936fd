"""Cursor pagination for list endpoints.

A `Paginator` is a lazy, ordered, single-use async iterator over response
pages. It fetches page N + 1 with the cursor found in page N and stops after
the first page that carries no cursor.

Example:
    ```python
    paginator = client.paginate(
        "GET",
        "/contacts",
        response_model=ListContactsResponse,
        next_cursor="_pagination.next",
    )
    async for page in paginator:
        for contact in page.results:
            ...
    ```
"""

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any, Generic, TypeVar

logger = logging.getLogger(__name__)

PageT = TypeVar("PageT")

FetchPage = Callable[[str | None], Awaitable[PageT]]
CursorExtractor = Callable[[Any], str | None]


def lookup(page: Any, path: str) -> Any:
    """Follow a dotted path through dicts and attributes; None if any step is missing."""
    value = page
    for part in path.split("."):
        if value is None:
            return None
        if isinstance(value, dict):
            value = value.get(part)
        else:
            value = getattr(value, part, None)
    return value


def cursor_at(path: str) -> CursorExtractor:
    """Build a cursor extractor reading ``path``, e.g. ``"meta.next_cursor"``."""

    def extract(page: Any) -> str | None:
        value = lookup(page, path)
        return str(value) if value not in (None, "") else None

    return extract


class Paginator(Generic[PageT]):
    """Single-use async iterator over the pages of a list endpoint.

    Args:
        fetch_page: Coroutine function fetching one page given the cursor
            (None for the first page).
        next_cursor: Returns the cursor for the following page, or None on the last page.
        cursor: Cursor to start from (default: the first page).
    """

    def __init__(
        self,
        fetch_page: FetchPage[PageT],
        next_cursor: CursorExtractor,
        cursor: str | None = None,
    ) -> None:
        self._fetch_page = fetch_page
        self._next_cursor = next_cursor
        self._cursor = cursor
        self._done = False
        self.pages_fetched = 0

    @property
    def cursor(self) -> str | None:
        """Cursor the next fetch will use."""
        return self._cursor

    def __aiter__(self) -> "Paginator[PageT]":
        return self

    async def __anext__(self) -> PageT:
        if self._done:
            raise StopAsyncIteration

        page = await self._fetch_page(self._cursor)
        self.pages_fetched += 1

        cursor = self._next_cursor(page)
        if cursor is None:
            self._done = True
        elif cursor == self._cursor:
            logger.warning(f"Next-page cursor repeated after page {self.pages_fetched}, stopping pagination")
            self._done = True
        else:
            logger.debug(f"Fetched page {self.pages_fetched}, continuing with cursor {cursor}")
            self._cursor = cursor

        return page

    async def items(self, extract: Callable[[PageT], Any] | str) -> AsyncIterator[Any]:
        """Iterate over the items of every remaining page.

        Args:
            extract: Callable returning a page's items, or a dotted path to them.
        """
        if isinstance(extract, str):
            path = extract
            getter = lambda page: lookup(page, path) or []  # noqa: E731
        else:
            getter = extract

        async for page in self:
            for item in getter(page):
                yield item
