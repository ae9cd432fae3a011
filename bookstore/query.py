# bookstore/query.py
"""
Query construction for the paginated catalog listing.

Sorting goes through a static ``SortField -> column`` table instead of
branching on the raw field name. Unknown names are normalized to
``SortField.TITLE`` in ``SortField.parse`` before any query is built.

Numeric columns are cast to ``Float`` inside ORDER BY. SQLite has no real
fixed-point type, and a ``Numeric`` column can come back from other engines
or adapters as text; the cast keeps ``price`` and ``page_count`` ordered by
value (9.99 < 10.99) regardless of how the engine stores them.

Every ordering ends with ``Book.id`` ascending so equal keys come back in a
stable order.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import Float, cast, func, select

from .errors import ValidationError
from .models import Book

logger = logging.getLogger(__name__)

ALL_CATEGORIES = "All"


class SortField(str, enum.Enum):
    TITLE = "title"
    AUTHOR = "author"
    PUBLISHER = "publisher"
    ISBN = "isbn"
    CATEGORY = "category"
    CLASSIFICATION = "classification"
    PAGE_COUNT = "pageCount"
    PRICE = "price"

    @classmethod
    def parse(cls, value: Optional[str]) -> "SortField":
        key = (value or "").strip().lower()
        field = _SORT_FIELD_NAMES.get(key)
        if field is None:
            logger.debug("unknown sort field %r, using title", value)
            return cls.TITLE
        return field


_SORT_FIELD_NAMES = {f.value.lower(): f for f in SortField}
# admin screens send "Pages"
_SORT_FIELD_NAMES.update({"pages": SortField.PAGE_COUNT, "page_count": SortField.PAGE_COUNT})

SORT_COLUMNS = {
    SortField.TITLE: Book.title,
    SortField.AUTHOR: Book.author,
    SortField.PUBLISHER: Book.publisher,
    SortField.ISBN: Book.isbn,
    SortField.CATEGORY: Book.category,
    SortField.CLASSIFICATION: Book.classification,
    SortField.PAGE_COUNT: cast(Book.page_count, Float),
    SortField.PRICE: cast(Book.price, Float),
}


class SortOrder(str, enum.Enum):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, value: Optional[str]) -> "SortOrder":
        return cls.ASC if (value or "").strip().lower() == "asc" else cls.DESC


@dataclass(frozen=True)
class ListQuery:
    """Normalized arguments of a catalog listing."""

    page: int = 1
    page_size: int = 5
    sort_field: SortField = SortField.TITLE
    sort_order: SortOrder = SortOrder.ASC
    category: Optional[str] = None

    @classmethod
    def build(
        cls,
        page: int = 1,
        page_size: int = 5,
        sort_field: Optional[str] = "Title",
        sort_order: Optional[str] = "asc",
        category: Optional[str] = None,
        max_page_size: Optional[int] = None,
    ) -> "ListQuery":
        if page < 1:
            raise ValidationError("page must be >= 1")
        if page_size < 1:
            raise ValidationError("pageSize must be >= 1")
        if max_page_size is not None and page_size > max_page_size:
            raise ValidationError(f"pageSize must be <= {max_page_size}")
        if not category or category == ALL_CATEGORIES:
            category = None
        return cls(
            page=page,
            page_size=page_size,
            sort_field=SortField.parse(sort_field),
            sort_order=SortOrder.parse(sort_order),
            category=category,
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    def filtered(self):
        stmt = select(Book)
        if self.category is not None:
            stmt = stmt.where(Book.category == self.category)
        return stmt

    def count_statement(self):
        return select(func.count()).select_from(self.filtered().subquery())

    def page_statement(self):
        column = SORT_COLUMNS[self.sort_field]
        key = column.asc() if self.sort_order is SortOrder.ASC else column.desc()
        return (
            self.filtered()
            .order_by(key, Book.id.asc())
            .offset(self.offset)
            .limit(self.page_size)
        )
