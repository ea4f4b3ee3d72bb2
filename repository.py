import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

import models, schemas
from exceptions import BookNotFoundError, DuplicateIsbnError

logger = logging.getLogger(__name__)

LIKE_ESCAPE = "\\"


def _contains_pattern(value: str) -> str:
    escaped = (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


def _is_duplicate_isbn(exc: IntegrityError) -> bool:
    # sqlite: "UNIQUE constraint failed: books.isbn", postgres: "duplicate key value ... books_isbn_key"
    message = str(exc.orig).lower()
    return "isbn" in message and ("unique" in message or "duplicate" in message)


class BookRepository:
    def __init__(self, db: Session):
        self.db = db

    def exists_by_isbn(self, isbn: str) -> bool:
        query = self.db.query(models.Book.id).filter(models.Book.isbn == isbn)
        return self.db.query(query.exists()).scalar()

    def find_by_id(self, book_id: int) -> models.Book | None:
        return self.db.get(models.Book, book_id)

    def save(self, book: models.Book) -> models.Book:
        if book.id is None:
            self.db.add(book)
        else:
            if self.db.get(models.Book, book.id) is None:
                raise BookNotFoundError(f"Book {book.id} does not exist")
            book = self.db.merge(book)

        book_id, isbn = book.id, book.isbn
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            if _is_duplicate_isbn(exc):
                logger.info(f"Rejected duplicate isbn {isbn!r} at the storage layer")
                raise DuplicateIsbnError() from exc
            raise
        except StaleDataError as exc:
            # row removed by another request after it was loaded
            self.db.rollback()
            raise BookNotFoundError(f"Book {book_id} does not exist") from exc

        self.db.refresh(book)
        return book

    def delete(self, book: models.Book) -> None:
        stored = self.db.get(models.Book, book.id)
        if stored is None:
            raise BookNotFoundError(f"Book {book.id} does not exist")
        self.db.delete(stored)
        self.db.commit()

    def find_filtered(
        self, book_filter: schemas.BookFilter, page: int, page_size: int
    ) -> tuple[list[models.Book], int]:
        query = self.db.query(models.Book)

        if book_filter.title:
            query = query.filter(
                models.Book.title.ilike(_contains_pattern(book_filter.title), escape=LIKE_ESCAPE)
            )
        if book_filter.author:
            query = query.filter(
                models.Book.author.ilike(_contains_pattern(book_filter.author), escape=LIKE_ESCAPE)
            )

        total = query.count()
        items = (
            query.order_by(models.Book.id.asc())
            .offset(page * page_size)
            .limit(page_size)
            .all()
        )
        return items, total
