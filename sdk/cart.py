# sdk/cart.py
"""
Client-side shopping cart.

The cart is a plain object owned by whoever builds the catalog view and is
handed to the code that needs it. Nothing here talks to the server and
nothing is persisted: a new process starts with an empty cart.

Lines are keyed by book id and keep insertion order. ``item_count`` and
``subtotal`` are computed from the lines on every read.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List

from bookstore.schemas import Book


@dataclass
class CartLine:
    book: Book
    quantity: int = 1

    @property
    def total(self) -> Decimal:
        return self.book.price * self.quantity


class Cart:
    def __init__(self):
        self._lines: Dict[int, CartLine] = {}
        self.last_viewed_page = 1

    # Transitions
    def add_to_cart(self, book: Book) -> CartLine:
        line = self._lines.get(book.id)
        if line is None:
            line = self._lines[book.id] = CartLine(book=book)
        else:
            line.quantity += 1
        return line

    def update_quantity(self, book_id: int, quantity: int) -> None:
        if quantity <= 0:
            self.remove_from_cart(book_id)
            return
        line = self._lines.get(book_id)
        if line is not None:
            line.quantity = quantity

    def remove_from_cart(self, book_id: int) -> None:
        self._lines.pop(book_id, None)

    def clear_cart(self) -> None:
        self._lines.clear()

    def set_last_viewed_page(self, page: int) -> None:
        self.last_viewed_page = page

    # Reads
    @property
    def lines(self) -> List[CartLine]:
        return list(self._lines.values())

    def quantity(self, book_id: int) -> int:
        line = self._lines.get(book_id)
        return line.quantity if line else 0

    @property
    def is_empty(self) -> bool:
        return not self._lines

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    @property
    def subtotal(self) -> Decimal:
        return sum((line.total for line in self._lines.values()), Decimal("0"))

    def __len__(self):
        return len(self._lines)

    def __contains__(self, book_id):
        return book_id in self._lines
