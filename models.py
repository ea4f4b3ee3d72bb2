from sqlalchemy import Column, Integer, String

from database import Base


class Book(Base):
    __tablename__ = "books"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    author = Column(String(255), nullable=False)
    isbn = Column(String(32), nullable=False, unique=True)

    def __repr__(self) -> str:
        return f"<Book id={self.id} isbn={self.isbn!r}>"
