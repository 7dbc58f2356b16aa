from typing import Any, Callable, Generic, Iterator, List, Optional, TypeVar
from .response import NordigenApiResponse, expect_success
from dataclasses import dataclass, field
from rich.progress import Progress
from .models import BasicError
import math


T = TypeVar("T")


@dataclass(frozen=True)
class ResponsePage(Generic[T]):
    """
    One page of a paginated listing.

    Attributes
    ----------
    count : int
        Total number of items in the collection.
    next : str, optional
        Absolute URL of the following page, None on the last page.
    previous : str, optional
        Absolute URL of the preceding page, None on the first page.
    results : list
        Items on this page.

    Notes
    -----
    The page remembers the parsers of its items and of the error body, so
    pages fetched through `get_next_page()` / `get_previous_page()` have
    the same element and error types.
    """

    count: int
    next: Optional[str]
    previous: Optional[str]
    results: List[T]
    item_parser: Callable[[Any], T] = field(repr=False, compare=False)
    error_parser: Callable[[Any], Any] = field(
        default=BasicError.from_dict, repr=False, compare=False
    )

    @classmethod
    def from_dict(
        cls,
        data: dict,
        item_parser: Callable[[Any], T],
        error_parser: Callable[[Any], Any] = BasicError.from_dict
    ) -> "ResponsePage[T]":
        return cls(
            count=int(data["count"]),
            next=data.get("next") or None,
            previous=data.get("previous") or None,
            results=[item_parser(item) for item in data["results"]],
            item_parser=item_parser,
            error_parser=error_parser,
        )

    @classmethod
    def parser(
        cls,
        item_parser: Callable[[Any], T],
        error_parser: Callable[[Any], Any] = BasicError.from_dict
    ) -> Callable[[dict], "ResponsePage[T]"]:
        """Response parser producing pages of `item_parser` items."""
        def parse(data: dict) -> "ResponsePage[T]":
            return cls.from_dict(data, item_parser, error_parser)
        return parse

    def _fetch(
        self,
        client,
        url: Optional[str]
    ) -> Optional[NordigenApiResponse]:
        if url is None:
            return None
        return client.make_request(
            path=url,
            method="GET",
            result_parser=ResponsePage.parser(self.item_parser, self.error_parser),
            error_parser=self.error_parser,
        )

    def get_next_page(self, client) -> Optional[NordigenApiResponse]:
        """
        Fetch the page after this one.

        Parameters
        ----------
        client : NordigenClient
            Client whose request pipeline performs the call.

        Returns
        -------
        ApiSuccess or ApiFailure or None
            None if this is the last page (no request is made).
        """
        return self._fetch(client, self.next)

    def get_previous_page(self, client) -> Optional[NordigenApiResponse]:
        """
        Fetch the page before this one.

        Returns
        -------
        ApiSuccess or ApiFailure or None
            None if this is the first page (no request is made).
        """
        return self._fetch(client, self.previous)

    def iter_pages(self, client) -> Iterator["ResponsePage[T]"]:
        """
        Yield this page and every following one.

        Raises
        ------
        NordigenApiError
            If fetching one of the following pages fails.
        """
        page = self
        while page is not None:
            yield page
            response = page.get_next_page(client)
            page = expect_success(response) if response is not None else None

    def get_all_results(
        self,
        client,
        show_progress: bool = False
    ) -> List[T]:
        """
        Collect the items of this page and all following pages.

        Parameters
        ----------
        client : NordigenClient
            Client used to follow the `next` links.
        show_progress : bool
            Display a progress bar while fetching.

        Returns
        -------
        list
            Items in collection order.
        """
        if not show_progress:
            return [item for page in self.iter_pages(client) for item in page.results]

        per_page = max(len(self.results), 1)
        total = max(math.ceil(self.count / per_page), 1)
        items: List[T] = []

        with Progress() as progress:
            task = progress.add_task("[cyan]Fetching pages...", total=total)
            for page in self.iter_pages(client):
                items.extend(page.results)
                progress.advance(task, 1)

        return items
