# bookstore/main.py
import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import Depends, FastAPI, Query, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from . import service
from .config import settings
from .database import get_db, init_db
from .errors import CatalogError
from .schemas import Book, BookIn, BookPage

logger = logging.getLogger(__name__)


def configure_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    init_db()
    logger.info("catalog API ready")
    yield


app = FastAPI(title="bookstore catalog", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------
# Error mapping
# ---------------------------
@app.exception_handler(CatalogError)
async def catalog_error_handler(request: Request, exc: CatalogError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # missing fields and malformed query values are client errors, not 422s
    errors = [
        {"loc": list(e.get("loc", ())), "msg": e.get("msg", "")}
        for e in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"detail": errors})


# ---------------------------
# Catalog endpoints
# ---------------------------
@app.get("/api/books", response_model=BookPage)
def list_books(
    page: int = Query(1),
    page_size: int = Query(settings.default_page_size, alias="pageSize"),
    sort_field: str = Query("Title", alias="sortField"),
    sort_order: str = Query("asc", alias="sortOrder"),
    category: Optional[str] = None,
    db: Session = Depends(get_db),
):
    return service.list_books(db, page, page_size, sort_field, sort_order, category)


@app.get("/api/books/categories", response_model=List[str])
def list_categories(db: Session = Depends(get_db)):
    return service.list_categories(db)


@app.get("/api/books/{book_id}", response_model=Book)
def get_book(book_id: int, db: Session = Depends(get_db)):
    return service.get_book(db, book_id)


@app.post("/api/books", response_model=Book, status_code=201)
def create_book(payload: BookIn, response: Response, db: Session = Depends(get_db)):
    book = service.create_book(db, payload)
    response.headers["Location"] = app.url_path_for("get_book", book_id=book.id)
    return book


@app.put("/api/books/{book_id}", status_code=204, response_class=Response)
def update_book(book_id: int, payload: Book, db: Session = Depends(get_db)):
    service.update_book(db, book_id, payload)
    return Response(status_code=204)


@app.delete("/api/books/{book_id}", status_code=204, response_class=Response)
def delete_book(book_id: int, db: Session = Depends(get_db)):
    service.delete_book(db, book_id)
    return Response(status_code=204)


if __name__ == "__main__":
    import uvicorn

    configure_logging()
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
