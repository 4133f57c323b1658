"""
Adobe Commerce REST integration.

Modules:
    api_client - Shared REST client and searchCriteria builder
    auth - Admin token issuance and caching
    products - Paginated product fetcher
    categories - Batch category lookup with per-ID fallback
    inventory - Batched inventory source-item lookup
    errors - Commerce exception hierarchy
"""

from .api_client import CommerceAPIClient, build_search_criteria
from .auth import AdminTokenProvider, TokenResult
from .categories import CategoryFetcher, CategoryFetchResult
from .errors import (
    ADMIN_TOKEN_EXPIRED,
    AdminTokenExpiredError,
    AuthenticationError,
    CommerceAPIError,
    CommerceError,
    CommerceIntegrationError,
    InvalidResponseFormatError,
    TokenRequestError,
)
from .inventory import InventoryFetcher, InventoryFetchResult
from .products import ProductFetcher, ProductFetchResult

__all__ = [
    # API Client
    'CommerceAPIClient',
    'build_search_criteria',
    # Stages
    'AdminTokenProvider',
    'TokenResult',
    'ProductFetcher',
    'ProductFetchResult',
    'CategoryFetcher',
    'CategoryFetchResult',
    'InventoryFetcher',
    'InventoryFetchResult',
    # Errors
    'ADMIN_TOKEN_EXPIRED',
    'CommerceError',
    'AuthenticationError',
    'TokenRequestError',
    'CommerceAPIError',
    'AdminTokenExpiredError',
    'InvalidResponseFormatError',
    'CommerceIntegrationError',
]
