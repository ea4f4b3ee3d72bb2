import logging

from fastapi import APIRouter, Depends, Query, Response, status
from fastapi.encoders import jsonable_encoder
from sqlalchemy.orm import Session

import models, schemas
from config import settings
from database import get_db
from exceptions import BookNotFoundError
from redis_client import BookSearchCache, get_search_cache
from repository import BookRepository
from services import BookService

router = APIRouter(prefix="/api/books", tags=["Books"])
logger = logging.getLogger(__name__)

ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": schemas.ApiErrors},
    status.HTTP_404_NOT_FOUND: {"description": "Book not found"},
}


def get_book_service(db: Session = Depends(get_db)) -> BookService:
    return BookService(BookRepository(db))


def _load_book(service: BookService, book_id: int) -> models.Book:
    book = service.get_by_id(book_id)
    if book is None:
        raise BookNotFoundError(f"Book {book_id} does not exist")
    return book


def _invalidate_books_cache(cache: BookSearchCache | None) -> None:
    if cache is not None:
        cache.invalidate()


# Create Book
@router.post(
    "",
    response_model=schemas.BookOut,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
def create_book(
    book: schemas.BookCreate,
    service: BookService = Depends(get_book_service),
    cache: BookSearchCache | None = Depends(get_search_cache),
):
    new_book = models.Book(title=book.title, author=book.author, isbn=book.isbn)
    saved = service.save(new_book)
    _invalidate_books_cache(cache)
    return saved


# Find Books
@router.get("", response_model=schemas.BookPage, response_model_by_alias=True)
def find_books(
    title: str | None = Query(default=None),
    author: str | None = Query(default=None),
    page: int = Query(default=0, ge=0),
    size: int = Query(default=settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    service: BookService = Depends(get_book_service),
    cache: BookSearchCache | None = Depends(get_search_cache),
):
    cache_key = None
    if cache is not None:
        cache_key = cache.key(title, author, page, size)
        cached = cache.get(cache_key)
        if cached is not None:
            return cached

    items, total = service.find(schemas.BookFilter(title=title, author=author), page, size)

    payload = schemas.BookPage(
        content=[schemas.BookOut.model_validate(item) for item in items],
        total_elements=total,
        total_pages=(total + size - 1) // size,
        pageable=schemas.Pageable(page_number=page, page_size=size),
    )
    encoded_payload = jsonable_encoder(payload, by_alias=True)

    if cache is not None and cache_key:
        cache.set(cache_key, encoded_payload)

    return encoded_payload


@router.get("/{book_id}", response_model=schemas.BookOut, responses=ERROR_RESPONSES)
def get_book(book_id: int, service: BookService = Depends(get_book_service)):
    return _load_book(service, book_id)


@router.put("/{book_id}", response_model=schemas.BookOut, responses=ERROR_RESPONSES)
def update_book(
    book_id: int,
    book: schemas.BookUpdate,
    service: BookService = Depends(get_book_service),
    cache: BookSearchCache | None = Depends(get_search_cache),
):
    db_book = _load_book(service, book_id)

    db_book.title = book.title
    db_book.author = book.author

    updated = service.update(db_book)
    _invalidate_books_cache(cache)
    return updated


@router.delete(
    "/{book_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=ERROR_RESPONSES,
)
def delete_book(
    book_id: int,
    service: BookService = Depends(get_book_service),
    cache: BookSearchCache | None = Depends(get_search_cache),
):
    db_book = _load_book(service, book_id)
    service.delete(db_book)
    _invalidate_books_cache(cache)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
