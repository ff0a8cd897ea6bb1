"""Errors raised by the sales query layer."""

from __future__ import annotations


class SalesQueryError(RuntimeError):
    """Base class; ``status_code`` is the HTTP status the API answers with."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidQueryError(SalesQueryError):
    """Malformed filter, sort or pagination input."""

    status_code = 400


class SaleNotFoundError(SalesQueryError):
    """No record with the requested transaction id."""

    status_code = 404

    def __init__(self, transaction_id: int):
        super().__init__("Sale not found")
        self.transaction_id = transaction_id


class StoreUnavailableError(SalesQueryError):
    """The record store could not execute the query."""

    status_code = 503
