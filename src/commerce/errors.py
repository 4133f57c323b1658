"""
Commerce Errors

Exception hierarchy for the Commerce REST integration.

    CommerceError
    ├── AuthenticationError         missing admin credentials
    ├── TokenRequestError           admin token endpoint returned non-2xx
    ├── CommerceAPIError            REST call failed (HTTP or transport)
    │   └── AdminTokenExpiredError  REST call returned 401
    ├── InvalidResponseFormatError  product page without an items list
    └── CommerceIntegrationError    pipeline failure, wraps the cause

Only AdminTokenExpiredError is retried, and only once, by the pipeline.
"""

from typing import Optional

ADMIN_TOKEN_EXPIRED = "ADMIN_TOKEN_EXPIRED"


class CommerceError(Exception):
    """Base class for all Commerce integration errors."""


class AuthenticationError(CommerceError):
    """Admin credentials were not provided."""

    def __init__(self, message: str = "Commerce admin credentials not provided"):
        super().__init__(message)


class TokenRequestError(CommerceError):
    """The admin token endpoint answered with a non-2xx status."""

    def __init__(self, status: Optional[int], body: str = ""):
        self.status = status
        self.body = body
        super().__init__(f"Token request failed: {status} - {body[:200]}")


class CommerceAPIError(CommerceError):
    """
    A REST request failed.

    Attributes:
        status: HTTP status code, or None for transport failures
        body: Response body (truncated) or the transport error text
        url: Requested URL
    """

    def __init__(self, message: str, status: Optional[int] = None, body: str = "", url: str = ""):
        self.status = status
        self.body = body
        self.url = url
        super().__init__(message)


class AdminTokenExpiredError(CommerceAPIError):
    """The bearer token was rejected (HTTP 401)."""

    is_token_expired = True

    def __init__(self, url: str = "", body: str = ""):
        super().__init__(ADMIN_TOKEN_EXPIRED, status=401, body=body, url=url)


class InvalidResponseFormatError(CommerceError):
    """A products page did not contain a well-formed items array."""

    def __init__(self, page: int):
        self.page = page
        super().__init__(f"Products fetch failed on page {page}: Invalid response format")


class CommerceIntegrationError(CommerceError):
    """Unrecoverable pipeline failure, tagged with the stage that failed."""

    def __init__(self, message: str, stage: str = ""):
        self.stage = stage
        prefix = f"{stage}: " if stage else ""
        super().__init__(f"Commerce API integration failed: {prefix}{message}")
