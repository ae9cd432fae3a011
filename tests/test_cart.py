# tests/test_cart.py
from decimal import Decimal

import pytest

from bookstore.schemas import Book
from conftest import SAMPLE_BOOKS
from sdk.cart import Cart


@pytest.fixture
def book_a():
    return Book.model_validate(dict(SAMPLE_BOOKS[0], id=1))


@pytest.fixture
def book_b():
    return Book.model_validate(dict(SAMPLE_BOOKS[1], id=2))


def test_new_cart_is_empty():
    cart = Cart()
    assert cart.is_empty
    assert cart.item_count == 0
    assert cart.subtotal == Decimal("0")
    assert cart.last_viewed_page == 1


def test_add_update_to_zero_scenario(book_a):
    cart = Cart()
    cart.add_to_cart(book_a)
    assert cart.item_count == 1
    assert cart.subtotal == book_a.price

    cart.add_to_cart(book_a)
    assert cart.item_count == 2
    assert cart.quantity(book_a.id) == 2
    assert len(cart) == 1

    cart.update_quantity(book_a.id, 0)
    assert book_a.id not in cart
    assert cart.item_count == 0
    assert cart.is_empty


def test_subtotal_is_exact(book_a, book_b):
    cart = Cart()
    cart.add_to_cart(book_a)
    cart.add_to_cart(book_b)
    cart.update_quantity(book_a.id, 3)
    assert cart.item_count == 4
    assert cart.subtotal == Decimal("9.99") * 3 + Decimal("11.99")
    assert [line.total for line in cart.lines] == [Decimal("29.97"), Decimal("11.99")]


def test_update_quantity_is_absolute(book_a):
    cart = Cart()
    cart.add_to_cart(book_a)
    cart.update_quantity(book_a.id, 5)
    cart.update_quantity(book_a.id, 2)
    assert cart.quantity(book_a.id) == 2


def test_negative_quantity_removes(book_a):
    cart = Cart()
    cart.add_to_cart(book_a)
    cart.update_quantity(book_a.id, -4)
    assert cart.is_empty


def test_update_absent_id_is_noop(book_a):
    cart = Cart()
    cart.update_quantity(book_a.id, 3)
    assert cart.is_empty


def test_snapshot_comes_from_argument(book_a):
    cart = Cart()
    cart.add_to_cart(book_a)
    repriced = book_a.model_copy(update={"price": Decimal("1.00")})
    cart.add_to_cart(repriced)
    # existing line keeps its first snapshot
    assert cart.lines[0].book.price == Decimal("9.99")
    assert cart.quantity(book_a.id) == 2


def test_remove_and_clear_are_idempotent(book_a, book_b):
    cart = Cart()
    cart.add_to_cart(book_a)
    cart.add_to_cart(book_b)
    cart.remove_from_cart(book_a.id)
    cart.remove_from_cart(book_a.id)
    assert [line.book.id for line in cart.lines] == [book_b.id]

    cart.clear_cart()
    cart.clear_cart()
    assert cart.is_empty


def test_lines_keep_insertion_order(book_a, book_b):
    cart = Cart()
    cart.add_to_cart(book_b)
    cart.add_to_cart(book_a)
    cart.add_to_cart(book_b)
    assert [line.book.id for line in cart.lines] == [book_b.id, book_a.id]


def test_carts_are_independent(book_a):
    first, second = Cart(), Cart()
    first.add_to_cart(book_a)
    first.set_last_viewed_page(3)
    assert second.is_empty
    assert second.last_viewed_page == 1
