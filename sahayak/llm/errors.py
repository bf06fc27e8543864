"""Failures raised by the generative-language client.

All of them are caught at the ExchangeClient boundary and turned into an
assistant message; nothing here is meant to reach the UI as an exception.
"""

from typing import Optional


class ExchangeError(Exception):
    """Base class for a failed call to the text-generation API."""


class TransportFailure(ExchangeError):
    """The request never produced an HTTP response (DNS, connection, timeout)."""


class HttpStatusFailure(ExchangeError):
    """The API answered with a non-2xx status."""

    def __init__(self, status_code: int, detail: Optional[str] = None):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"HTTP error! status: {status_code}")


class MalformedResponse(ExchangeError):
    """A 2xx response without a usable candidate text."""
