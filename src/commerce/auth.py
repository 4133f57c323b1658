"""
Admin Token Provider

Obtains Commerce admin bearer tokens and caches them per admin username.

Authentication flow:
    POST /rest/V1/integration/admin/token
    Body: {"username": "admin", "password": "..."}
    Response: "q1w2e3r4t5..."  (token as a quoted JSON string)
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..cache import CommerceCache
from ..cache.commerce_cache import ADMIN_TOKEN_OPERATION
from ..common.constants import ADMIN_TOKEN_ENDPOINT
from ..models import AdminCredentials
from .api_client import CommerceAPIClient
from .errors import AuthenticationError, CommerceAPIError, TokenRequestError

logger = logging.getLogger(__name__)


@dataclass
class TokenResult:
    token: str
    cache_hit: bool


def clean_token(raw) -> str:
    """Strip the quote characters Commerce wraps around the token."""
    return str(raw).replace('"', '').strip()


class AdminTokenProvider:
    """
    Issues and caches admin tokens.

    Usage:
        provider = AdminTokenProvider(client, cache, ttl=900)
        result = await provider.get_token(credentials)
        # on 401 somewhere downstream:
        await provider.invalidate_token(credentials.username)
    """

    def __init__(self, client: CommerceAPIClient, cache: Optional[CommerceCache] = None, ttl: int = 900):
        """
        Args:
            client: Commerce REST client
            cache: Optional cache; tokens are keyed by admin username
            ttl: Token cache lifetime in seconds
        """
        self.client = client
        self.cache = cache
        self.ttl = ttl

    @staticmethod
    def _cache_params(username: str) -> dict:
        return {"username": username}

    async def get_token(self, credentials: Optional[AdminCredentials]) -> TokenResult:
        """
        Return a bearer token, from cache when possible.

        Raises:
            AuthenticationError: If username or password is missing
            TokenRequestError: If the token endpoint answers non-2xx
        """
        if credentials is None or not credentials.username or not credentials.password:
            logger.error("Authentication failed: Commerce admin credentials not provided")
            raise AuthenticationError()

        params = self._cache_params(credentials.username)
        if self.cache is not None:
            cached = await self.cache.get(ADMIN_TOKEN_OPERATION, params)
            if cached:
                logger.info("Using cached Commerce admin token")
                return TokenResult(token=cached, cache_hit=True)
            logger.info("Admin token cache miss - requesting new token")

        logger.info("Requesting Commerce admin token from %s", self.client.build_url(ADMIN_TOKEN_ENDPOINT))
        try:
            raw = await self.client.request_async(
                "POST",
                ADMIN_TOKEN_ENDPOINT,
                data={"username": credentials.username, "password": credentials.password},
            )
        except CommerceAPIError as e:
            logger.error("Token request failed with status %s", e.status)
            raise TokenRequestError(e.status, e.body) from e

        token = clean_token(raw)
        if self.cache is not None:
            await self.cache.put(ADMIN_TOKEN_OPERATION, params, None, token, ttl=self.ttl)
            logger.info("Cached Commerce admin token for %ds", self.ttl)

        logger.info("Commerce admin token retrieved successfully")
        return TokenResult(token=token, cache_hit=False)

    async def invalidate_token(self, username: str) -> None:
        """Drop the cached token for ``username`` so the next get_token issues a fresh one."""
        logger.warning("Admin token expired, invalidating cached token")
        if self.cache is not None:
            await self.cache.delete(ADMIN_TOKEN_OPERATION, self._cache_params(username))
