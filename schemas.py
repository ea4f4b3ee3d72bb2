from pydantic import BaseModel, ConfigDict, Field


class BookCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    author: str = Field(min_length=1, max_length=255)
    isbn: str = Field(min_length=1, max_length=32)


class BookUpdate(BaseModel):
    # id and isbn are taken from the stored record, never from the body
    title: str = Field(min_length=1, max_length=255)
    author: str = Field(min_length=1, max_length=255)


class BookOut(BaseModel):
    id: int
    title: str
    author: str
    isbn: str

    model_config = ConfigDict(from_attributes=True)


class BookFilter(BaseModel):
    title: str | None = None
    author: str | None = None


class Pageable(BaseModel):
    page_number: int = Field(alias="pageNumber")
    page_size: int = Field(alias="pageSize")

    model_config = ConfigDict(populate_by_name=True)


class BookPage(BaseModel):
    content: list[BookOut]
    total_elements: int = Field(alias="totalElements")
    total_pages: int = Field(alias="totalPages")
    pageable: Pageable

    model_config = ConfigDict(populate_by_name=True)


class ApiErrors(BaseModel):
    errors: list[str]
