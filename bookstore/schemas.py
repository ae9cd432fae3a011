# bookstore/schemas.py
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from .models import DEFAULT_CLASSIFICATION


class BookIn(BaseModel):
    """Book fields without the id; the body of POST /api/books."""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    title: str
    author: str
    publisher: str
    isbn: str
    category: str
    classification: Optional[str] = DEFAULT_CLASSIFICATION
    page_count: int = Field(alias="pageCount")
    price: Decimal

    @field_validator("classification")
    @classmethod
    def _default_classification(cls, v: Optional[str]) -> str:
        return v or DEFAULT_CLASSIFICATION

    @field_validator("price", mode="before")
    @classmethod
    def _price_from_float(cls, v):
        # 9.99 must not become Decimal('9.9900000000000002131628...')
        if isinstance(v, float):
            return Decimal(str(v))
        return v

    @field_serializer("price", when_used="json")
    def _price_as_number(self, v: Decimal) -> float:
        return float(v)


class Book(BookIn):
    id: int


class BookPage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_books: int = Field(alias="totalBooks")
    books: List[Book]


def dump_book(book: BookIn) -> dict:
    """JSON-ready dict with the camelCase wire names."""
    return book.model_dump(mode="json", by_alias=True)
