DUPLICATE_ISBN_MESSAGE = "Isbn já cadastrado"


class BusinessError(Exception):
    """A request that breaks a catalog rule. Rendered as a 400."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class DuplicateIsbnError(BusinessError):
    def __init__(self, message: str = DUPLICATE_ISBN_MESSAGE):
        super().__init__(message)


class InvalidArgumentError(ValueError):
    pass


class BookNotFoundError(LookupError):
    pass
