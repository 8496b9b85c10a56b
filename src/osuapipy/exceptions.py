"""
exceptions.py

Centralized custom exception types for the library.

Every failure raised by the request engine is an OsuApiError (or subclass).
Besides the human readable message and optional HTTP status code, each error
carries the server, endpoint and query parameters of the failed call so a
caller can reproduce it without digging through logs.
"""

from typing import Optional, Any, Dict, Union


class OsuApiError(Exception):
    """
    Base class for all library-specific exceptions.

    Attributes
    ----------
    message: str
        Human readable error message.
    code: Optional[int]
        HTTP status code if applicable.
    response: Optional[Any]
        Raw response object (requests.Response or decoded payload) for debugging.
    server: Optional[str]
        Base server URL the request was sent to.
    endpoint: Optional[str]
        Endpoint name (e.g. "get_beatmaps").
    parameters: Optional[Union[str, Dict[str, Any]]]
        Query parameters used for the call (never includes the API key).
    attempts: Optional[int]
        Number of attempts made before giving up.
    """

    def __init__(
        self,
        message: str,
        code: Optional[int] = None,
        response: Optional[Any] = None,
        *,
        server: Optional[str] = None,
        endpoint: Optional[str] = None,
        parameters: Optional[Union[str, Dict[str, Any]]] = None,
        attempts: Optional[int] = None,
    ):
        self.message = message
        self.code = code
        self.response = response
        self.server = server
        self.endpoint = endpoint
        self.parameters = parameters
        self.attempts = attempts
        super().__init__(self.__str__())

    def with_context(
        self,
        server: Optional[str],
        endpoint: Optional[str],
        parameters: Optional[Union[str, Dict[str, Any]]],
        attempts: Optional[int] = None,
    ) -> "OsuApiError":
        """Attach request context to this error and return it (for `raise err.with_context(...)`)."""
        self.server = server
        self.endpoint = endpoint
        self.parameters = parameters
        self.attempts = attempts
        self.args = (self.__str__(),)
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Return the structured failure shape: message, server, endpoint, parameters."""
        return {
            "message": self.message,
            "server": self.server,
            "endpoint": self.endpoint,
            "parameters": self.parameters,
        }

    def __str__(self) -> str:
        base = f"[OsuApiError] {self.message}"
        if self.code is not None:
            base += f" (code={self.code})"
        if self.endpoint:
            base += f" [endpoint={self.endpoint} params={self.parameters!r}]"
        return base

    def __repr__(self) -> str:
        return (
            f"<{self.__class__.__name__} code={self.code!r} message={self.message!r} "
            f"endpoint={self.endpoint!r}>"
        )


class BadRequestError(OsuApiError):
    """HTTP 400 - Client sent invalid query parameters."""


class UnauthorizedError(OsuApiError):
    """HTTP 401 - Missing or invalid API key."""


class ForbiddenError(OsuApiError):
    """HTTP 403 - Authenticated but not allowed to access resource."""


class NotFoundError(OsuApiError):
    """
    The query executed but matched nothing.

    Raised for HTTP 404, for an empty result array and for a match payload
    marked unavailable. Distinct from NetworkError so callers can tell
    "not found" apart from "could not ask".
    """


class RateLimitError(OsuApiError):
    """HTTP 429 - Rate limit exceeded on every attempt."""


class ServerError(OsuApiError):
    """5xx - Server-side error from the API."""


class NetworkError(OsuApiError):
    """Network / transport related error (timeouts, connection failures, DNS)."""


class InvalidResponseError(OsuApiError):
    """Raised when the API returns a body that is not valid JSON."""


class ApiResponseError(OsuApiError):
    """Raised when a 2xx body is an object carrying an explicit "error" field."""


class ConfigurationError(OsuApiError):
    """Raised when client configuration is invalid or incomplete (e.g. no API key)."""


def map_http_status(status_code: int, message: str = "", response: Optional[Any] = None) -> OsuApiError:
    """
    Convert an HTTP status code + message into an appropriate OsuApiError instance.

    Parameters
    ----------
    status_code : int
        HTTP status code returned by the server.
    message : str
        Response text or short explanation.
    response : Any
        Raw response object (optional) to attach to the exception instance.

    Returns
    -------
    OsuApiError
        An instance of a subclass representing the status.
    """
    if status_code == 400:
        return BadRequestError(message or "Bad Request", status_code, response)
    if status_code == 401:
        return UnauthorizedError(message or "Unauthorized (invalid API key?)", status_code, response)
    if status_code == 403:
        return ForbiddenError(message or "Forbidden", status_code, response)
    if status_code == 404:
        return NotFoundError(message or "Not Found", status_code, response)
    if status_code == 429:
        return RateLimitError(message or "Rate Limited", status_code, response)
    if 500 <= status_code <= 599:
        return ServerError(message or "Server Error", status_code, response)
    # fallback
    return OsuApiError(message or f"HTTP {status_code}", status_code, response)
