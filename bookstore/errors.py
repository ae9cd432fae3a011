# bookstore/errors.py


class CatalogError(Exception):
    """Base class for catalog failures. ``status_code`` is the HTTP status it maps to."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(CatalogError):
    """Malformed or incomplete input."""

    status_code = 400


class NotFoundError(CatalogError):
    status_code = 404


class StoreError(CatalogError):
    """The underlying store is unreachable or a query failed."""

    status_code = 500
