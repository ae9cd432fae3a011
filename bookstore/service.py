# bookstore/service.py
import functools
import logging
from typing import List, Optional, Union

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import models
from .config import settings
from .errors import NotFoundError, StoreError, ValidationError
from .query import ListQuery
from .schemas import Book, BookIn, BookPage

# This file contains the catalog operations behind the API endpoints.

logger = logging.getLogger(__name__)


def _store_errors(fn):
    """Log and re-raise SQLAlchemy failures as StoreError."""

    @functools.wraps(fn)
    def wrapper(db: Session, *args, **kwargs):
        try:
            return fn(db, *args, **kwargs)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("%s failed: %s", fn.__name__, e)
            raise StoreError(f"store error during {fn.__name__}") from e

    return wrapper


def _get_or_404(db: Session, book_id: int) -> models.Book:
    row = db.get(models.Book, book_id)
    if row is None:
        raise NotFoundError(f"book {book_id} not found")
    return row


def _apply(row: models.Book, data: BookIn) -> None:
    row.title = data.title
    row.author = data.author
    row.publisher = data.publisher
    row.isbn = data.isbn
    row.category = data.category
    row.classification = data.classification
    row.page_count = data.page_count
    row.price = data.price


# Listing
@_store_errors
def list_books(
    db: Session,
    page: int = 1,
    page_size: int = 5,
    sort_field: Optional[str] = "Title",
    sort_order: Optional[str] = "asc",
    category: Optional[str] = None,
) -> BookPage:
    query = ListQuery.build(
        page=page,
        page_size=page_size,
        sort_field=sort_field,
        sort_order=sort_order,
        category=category,
        max_page_size=settings.max_page_size,
    )
    total = db.execute(query.count_statement()).scalar_one()
    rows = db.execute(query.page_statement()).scalars().all()
    return BookPage(total_books=total, books=[Book.model_validate(r) for r in rows])


@_store_errors
def list_categories(db: Session) -> List[str]:
    stmt = select(models.Book.category).distinct().order_by(models.Book.category)
    return list(db.execute(stmt).scalars().all())


# CRUD
@_store_errors
def get_book(db: Session, book_id: int) -> Book:
    return Book.model_validate(_get_or_404(db, book_id))


@_store_errors
def create_book(db: Session, draft: Union[BookIn, dict]) -> Book:
    if not isinstance(draft, BookIn):
        try:
            draft = BookIn.model_validate(draft)
        except PydanticValidationError as e:
            raise ValidationError(f"invalid book: {e.error_count()} field error(s)") from e
    row = models.Book()
    _apply(row, draft)
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info("created book %s (%s)", row.id, row.title)
    return Book.model_validate(row)


@_store_errors
def update_book(db: Session, book_id: int, book: Book) -> None:
    if book.id != book_id:
        raise ValidationError(f"id mismatch: path {book_id}, body {book.id}")
    row = _get_or_404(db, book_id)
    _apply(row, book)
    db.commit()
    logger.info("updated book %s", book_id)


@_store_errors
def delete_book(db: Session, book_id: int) -> None:
    row = _get_or_404(db, book_id)
    db.delete(row)
    db.commit()
    logger.info("deleted book %s", book_id)
