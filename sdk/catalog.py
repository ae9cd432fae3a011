# sdk/catalog.py
from typing import Any, Dict, List, Optional, Union

import httpx
import requests
from pydantic import ValidationError as PydanticValidationError

from bookstore.config import settings
from bookstore.errors import CatalogError, NotFoundError, StoreError, ValidationError
from bookstore.schemas import Book, BookIn, BookPage, dump_book

BOOKS_PATH = "/api/books"


def _detail(r) -> str:
    try:
        body = r.json()
    except ValueError:
        return f"HTTP {r.status_code}: {r.text}"
    if isinstance(body, dict) and "detail" in body:
        return str(body["detail"])
    return str(body)


def _check(r):
    """Raise the catalog error matching a failed response; return r otherwise."""
    code = r.status_code
    if code < 400:
        return r
    if code in (400, 422):
        raise ValidationError(_detail(r))
    if code == 404:
        raise NotFoundError(_detail(r))
    if code >= 500:
        raise StoreError(_detail(r))
    raise CatalogError(_detail(r))


def _list_params(page, page_size, sort_field, sort_order, category) -> Dict[str, Any]:
    params: Dict[str, Any] = {
        "page": page,
        "pageSize": page_size,
        "sortField": sort_field,
        "sortOrder": sort_order,
    }
    if category and category != "All":
        params["category"] = category
    return params


class CatalogClient:
    """HTTP client for the catalog API.

    ``session`` defaults to a ``requests.Session``; anything with the same
    get/post/put/delete surface (a FastAPI ``TestClient`` for example) works.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[int] = None,
        session=None,
    ):
        self.base_url = (base_url or settings.client_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.client_timeout
        self.session = session if session is not None else requests.Session()

    def _url(self, path: str = "") -> str:
        return f"{self.base_url}{BOOKS_PATH}{path}"

    def _send(self, method: str, url: str, **kwargs):
        # injected test sessions configure their own timeouts
        if isinstance(self.session, requests.Session):
            kwargs["timeout"] = self.timeout
        try:
            r = self.session.request(method, url, **kwargs)
        except (requests.RequestException, httpx.HTTPError) as e:
            raise StoreError(f"catalog unreachable: {e}") from e
        return _check(r)

    # Queries
    def list_books(
        self,
        page: int = 1,
        page_size: int = 5,
        sort_field: str = "Title",
        sort_order: str = "asc",
        category: Optional[str] = None,
    ) -> BookPage:
        params = _list_params(page, page_size, sort_field, sort_order, category)
        r = self._send("GET", self._url(), params=params)
        return BookPage.model_validate(r.json())

    def list_categories(self) -> List[str]:
        return self._send("GET", self._url("/categories")).json()

    def get_book(self, book_id: int) -> Book:
        return Book.model_validate(self._send("GET", self._url(f"/{book_id}")).json())

    # Admin
    def create_book(self, draft: Union[BookIn, Dict[str, Any]]) -> Book:
        if not isinstance(draft, BookIn):
            # Decimal prices are not JSON serializable as-is
            try:
                draft = BookIn.model_validate(draft)
            except PydanticValidationError as e:
                raise ValidationError(f"invalid book: {e.error_count()} field error(s)") from e
        body = dump_book(draft)
        body.pop("id", None)
        r = self._send("POST", self._url(), json=body)
        return Book.model_validate(r.json())

    def update_book(self, book: Book) -> None:
        self._send("PUT", self._url(f"/{book.id}"), json=dump_book(book))

    def delete_book(self, book_id: int) -> None:
        self._send("DELETE", self._url(f"/{book_id}"))

    # Async listing
    async def list_books_async(
        self,
        page: int = 1,
        page_size: int = 5,
        sort_field: str = "Title",
        sort_order: str = "asc",
        category: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> BookPage:
        params = _list_params(page, page_size, sort_field, sort_order, category)
        async with httpx.AsyncClient(timeout=self.timeout, transport=transport) as client:
            try:
                r = await client.get(self._url(), params=params)
            except httpx.HTTPError as e:
                raise StoreError(f"catalog unreachable: {e}") from e
        return BookPage.model_validate(_check(r).json())

    def close(self):
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
