# bookstore/models.py
from sqlalchemy import Column, Integer, Numeric, String

from .database import Base

DEFAULT_CLASSIFICATION = "Unclassified"


class Book(Base):
    __tablename__ = "books"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(500), nullable=False)
    author = Column(String(200), nullable=False)
    publisher = Column(String(200), nullable=False)
    isbn = Column(String(20), nullable=False)
    category = Column(String(100), nullable=False, index=True)
    classification = Column(String(100), nullable=False, default=DEFAULT_CLASSIFICATION)
    page_count = Column(Integer, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)

    def __repr__(self):
        return f"<Book(id={self.id}, title={self.title!r})>"
