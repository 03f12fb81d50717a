"""
Error types raised by the catalog layers.
Handlers translate them into HTTP status codes.
"""


class CatalogError(Exception):
    """Base class for catalog errors."""


class ValidationError(CatalogError):
    """Malformed or missing request input."""


class NotFoundError(CatalogError):
    """No book matched the given external identifier."""

    def __init__(self, book_id: str):
        super().__init__(f"no book found with id {book_id}")
        self.book_id = book_id


class StoreError(CatalogError):
    """The record store failed to perform an operation."""


class DuplicateBookError(StoreError):
    """An insert violated one of the collection's unique indexes."""


class DataIntegrityError(StoreError):
    """More documents matched than the unique indexes allow."""


class TransportError(CatalogError):
    """The frontend could not obtain a usable answer from the backend."""
