import logging

import models, schemas
from exceptions import DuplicateIsbnError, InvalidArgumentError
from repository import BookRepository

logger = logging.getLogger(__name__)


class BookService:
    def __init__(self, repository: BookRepository):
        self.repository = repository

    def save(self, book: models.Book) -> models.Book:
        if self.repository.exists_by_isbn(book.isbn):
            logger.info(f"Rejected book with duplicate isbn {book.isbn!r}")
            raise DuplicateIsbnError()
        saved = self.repository.save(book)
        logger.info(f"Created book {saved.id} ({saved.isbn})")
        return saved

    def get_by_id(self, book_id: int) -> models.Book | None:
        return self.repository.find_by_id(book_id)

    def update(self, book: models.Book | None) -> models.Book:
        if book is None or book.id is None:
            raise InvalidArgumentError("Book id cant be null")
        updated = self.repository.save(book)
        logger.info(f"Updated book {updated.id}")
        return updated

    def delete(self, book: models.Book | None) -> None:
        if book is None or book.id is None:
            raise InvalidArgumentError("Book id cant be null")
        book_id = book.id
        self.repository.delete(book)
        logger.info(f"Deleted book {book_id}")

    def find(
        self, book_filter: schemas.BookFilter, page: int, page_size: int
    ) -> tuple[list[models.Book], int]:
        return self.repository.find_filtered(book_filter, page, page_size)
