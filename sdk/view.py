# sdk/view.py
import logging
import math
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

import httpx
import requests

from bookstore.config import settings
from bookstore.errors import CatalogError
from bookstore.query import ALL_CATEGORIES
from bookstore.schemas import Book

from .cart import Cart
from .catalog import CatalogClient

logger = logging.getLogger(__name__)

PAGE_SIZES = (5, 10, 20)
SORT_CHOICES = ("Title", "Author", "Publisher", "ISBN", "Category", "Classification", "Pages", "Price")

# what a fetch failure can look like by the time it reaches the view
FETCH_ERRORS = (CatalogError, requests.RequestException, httpx.HTTPError)


@dataclass
class Notification:
    message: str
    is_error: bool
    expires_at: float


class CatalogView:
    """State behind the catalog screen: query parameters, current page, notices.

    The view never raises fetch failures to its caller. They are turned into a
    notification that disappears after ``notification_seconds``.
    """

    def __init__(
        self,
        client: CatalogClient,
        cart: Optional[Cart] = None,
        notification_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.client = client
        self.cart = cart if cart is not None else Cart()
        self.notification_seconds = (
            settings.notification_seconds if notification_seconds is None else notification_seconds
        )
        self._clock = clock
        self._notification: Optional[Notification] = None

        self.page = 1
        self.page_size = 5
        self.sort_field = "Title"
        self.sort_order = "asc"
        self.category = ALL_CATEGORIES

        self.books: List[Book] = []
        self.total_books = 0
        self.categories: List[str] = []

    # ---------------------------
    # Notifications
    # ---------------------------
    def notify(self, message: str, is_error: bool = False) -> None:
        self._notification = Notification(message, is_error, self._clock() + self.notification_seconds)

    @property
    def notification(self) -> Optional[Notification]:
        n = self._notification
        if n is not None and self._clock() >= n.expires_at:
            self._notification = None
            return None
        return n

    def dismiss(self) -> None:
        self._notification = None

    # ---------------------------
    # Fetching
    # ---------------------------
    def load_categories(self) -> bool:
        try:
            self.categories = self.client.list_categories()
        except FETCH_ERRORS as e:
            logger.warning("fetching categories failed: %s", e)
            self.notify("Failed to load categories", is_error=True)
            return False
        return True

    def refresh(self) -> bool:
        try:
            result = self.client.list_books(
                page=self.page,
                page_size=self.page_size,
                sort_field=self.sort_field,
                sort_order=self.sort_order,
                category=None if self.category == ALL_CATEGORIES else self.category,
            )
        except FETCH_ERRORS as e:
            logger.warning("fetching books failed: %s", e)
            self.notify("Failed to load books", is_error=True)
            return False
        self.books = result.books
        self.total_books = result.total_books
        # "continue shopping" goes back here
        self.cart.set_last_viewed_page(self.page)
        return True

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_books / self.page_size)

    # ---------------------------
    # Query parameters
    # ---------------------------
    def set_category(self, category: Optional[str]) -> None:
        self.category = category or ALL_CATEGORIES
        self.page = 1

    def set_page_size(self, page_size: int) -> None:
        if page_size < 1:
            raise ValueError("page size must be positive")
        self.page_size = page_size
        self.page = 1

    def set_sort(self, field: str, order: Optional[str] = None) -> None:
        self.sort_field = field
        if order is not None:
            self.sort_order = order

    def go_to_page(self, page: int) -> bool:
        if page < 1 or page > max(1, self.total_pages):
            return False
        self.page = page
        return True

    def next_page(self) -> bool:
        return self.go_to_page(self.page + 1)

    def previous_page(self) -> bool:
        return self.go_to_page(self.page - 1)

    # ---------------------------
    # Cart
    # ---------------------------
    def add_to_cart(self, book: Book) -> None:
        self.cart.add_to_cart(book)
        self.notify(f'"{book.title}" has been added to your cart!')

    def checkout(self) -> bool:
        """No order is placed server side; the cart is just emptied."""
        if self.cart.is_empty:
            return False
        self.notify("Thank you for your purchase! This would normally proceed to checkout.")
        self.cart.clear_cart()
        self.page = 1
        return True

    def grouped_by_classification(self) -> Dict[str, List[Book]]:
        groups: Dict[str, List[Book]] = {}
        for book in self.books:
            groups.setdefault(book.classification or "Uncategorized", []).append(book)
        return groups

    # ---------------------------
    # Admin
    # ---------------------------
    def _admin(self, action: Callable, ok: str, failed: str):
        try:
            result = action()
        except FETCH_ERRORS as e:
            logger.warning("%s: %s", failed, e)
            self.notify(failed, is_error=True)
            return None
        self.notify(ok)
        if self.refresh() and self.page > max(1, self.total_pages):
            # the last page emptied out
            self.go_to_page(max(1, self.total_pages))
            self.refresh()
        return result

    def create_book(self, draft) -> Optional[Book]:
        return self._admin(lambda: self.client.create_book(draft), "Book added successfully", "Failed to add book")

    def update_book(self, book: Book) -> bool:
        done = self._admin(lambda: self.client.update_book(book) or True,
                           "Book updated successfully", "Failed to update book")
        return bool(done)

    def delete_book(self, book_id: int) -> bool:
        done = self._admin(lambda: self.client.delete_book(book_id) or True,
                           "Book deleted successfully", "Failed to delete book")
        return bool(done)
