"""Error taxonomy shared by the store, the services and the HTTP layer."""

from __future__ import annotations


class ShipmentError(Exception):
    """Base error; carries the code and HTTP status the routers respond with."""

    code = "error"
    status_code = 500

    def __init__(self, message: str, code: str | None = None, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code


class ValidationError(ShipmentError):
    """Raised when a candidate record misses required fields."""

    code = "validation_error"
    status_code = 400


class NotFoundError(ShipmentError):
    """Raised when no record matches the given id or tracking number."""

    code = "not_found"
    status_code = 404


class StoreError(ShipmentError):
    """Base class for failures of the backing file."""

    code = "store_error"
    status_code = 500


class StoreIOError(StoreError):
    """Raised when the backing file cannot be read or written."""

    code = "store_io_error"


class CorruptStoreError(StoreError):
    """Raised when the backing file does not hold a JSON array of records."""

    code = "corrupt_store"
