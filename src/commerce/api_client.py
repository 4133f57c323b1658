"""
Commerce API Client

Shared client for the Adobe Commerce (Magento) REST API.
Handles base URL building, bearer headers, searchCriteria queries,
and mapping of HTTP failures onto the commerce error hierarchy.
"""

import asyncio
import logging
from typing import Any, Dict, Iterable, Optional, Tuple

import requests

from .errors import AdminTokenExpiredError, CommerceAPIError

logger = logging.getLogger(__name__)

# (field, value, condition_type)
SearchFilter = Tuple[str, Any, str]


def build_search_criteria(
    page_size: Optional[int] = None,
    current_page: Optional[int] = None,
    filters: Iterable[SearchFilter] = (),
) -> Dict[str, Any]:
    """
    Build Magento searchCriteria query parameters.

    Each filter goes into its own filter group, so filters are AND-ed.

    Args:
        page_size: searchCriteria[pageSize]
        current_page: searchCriteria[currentPage]
        filters: (field, value, condition_type) tuples

    Returns:
        Dictionary suitable for requests' ``params`` argument

    Example:
        >>> build_search_criteria(50, 1, [("sku", "A,B", "in")])
        {'searchCriteria[pageSize]': 50, 'searchCriteria[currentPage]': 1,
         'searchCriteria[filter_groups][0][filters][0][field]': 'sku', ...}
    """
    params: Dict[str, Any] = {}
    if page_size is not None:
        params["searchCriteria[pageSize]"] = page_size
    if current_page is not None:
        params["searchCriteria[currentPage]"] = current_page

    for group, (field, value, condition) in enumerate(filters):
        prefix = f"searchCriteria[filter_groups][{group}][filters][0]"
        params[f"{prefix}[field]"] = field
        params[f"{prefix}[value]"] = value
        params[f"{prefix}[condition_type]"] = condition

    return params


class CommerceAPIClient:
    """
    Shared client for the Commerce REST API.

    Handles:
    - REST URL building (``{base_url}/rest/{version}/{endpoint}``)
    - Bearer token headers
    - Error mapping (401 -> AdminTokenExpiredError, other failures -> CommerceAPIError)
    - Async dispatch so several requests can be in flight at once

    Usage:
        client = CommerceAPIClient(base_url="https://store.example.com")

        # Blocking request
        token = client.rest_request("POST", "integration/admin/token", data=creds)

        # From a coroutine
        page = await client.request_async("GET", "products", params=criteria, token=token)
    """

    API_VERSION = "V1"

    def __init__(self, base_url: str, api_version: str = API_VERSION, timeout: int = 30):
        """
        Initialize the API client.

        Args:
            base_url: Store base URL (e.g. "https://store.example.com")
            api_version: REST API version segment
            timeout: Per-request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.api_version = api_version
        self.rest_url = f"{self.base_url}/rest/{api_version}"
        self.timeout = timeout

        self.session = requests.Session()
        self.session.headers.update({
            "Content-Type": "application/json",
            "Accept": "application/json",
        })

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.session.close()

    def close(self):
        self.session.close()

    def build_url(self, endpoint: str) -> str:
        """Return the absolute REST URL for an endpoint such as ``products``."""
        return f"{self.rest_url}/{endpoint.lstrip('/')}"

    def rest_request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
        token: Optional[str] = None,
    ) -> Any:
        """
        Make a REST API request.

        Args:
            method: HTTP method (GET or POST)
            endpoint: Endpoint relative to the REST root (e.g. "products")
            params: Query parameters
            data: JSON body for POST
            token: Bearer token

        Returns:
            Decoded JSON body, or the raw text if the body is not JSON

        Raises:
            AdminTokenExpiredError: On HTTP 401
            CommerceAPIError: On any other non-2xx status or transport failure
        """
        url = self.build_url(endpoint)
        headers = {"Authorization": f"Bearer {token}"} if token else None

        try:
            if method == "GET":
                response = self.session.get(url, params=params, headers=headers, timeout=self.timeout)
            elif method == "POST":
                response = self.session.post(url, json=data, params=params, headers=headers,
                                             timeout=self.timeout)
            else:
                raise ValueError(f"Unsupported method: {method}")
        except requests.exceptions.Timeout as e:
            logger.error("Request timeout: %s", endpoint)
            raise CommerceAPIError(f"Request timeout: {endpoint}", url=url) from e
        except requests.exceptions.RequestException as e:
            logger.error("Request failed: %s", e)
            raise CommerceAPIError(f"Request failed: {e}", body=str(e), url=url) from e

        if response.status_code == 401:
            logger.warning("HTTP 401 on %s, bearer token rejected", endpoint)
            raise AdminTokenExpiredError(url=url, body=response.text[:200])

        if response.status_code >= 400:
            error_msg = response.text[:200]
            logger.error("API Error %d on %s: %s", response.status_code, endpoint, error_msg)
            raise CommerceAPIError(
                f"HTTP {response.status_code} on {endpoint}",
                status=response.status_code,
                body=error_msg,
                url=url,
            )

        try:
            return response.json()
        except ValueError:
            return response.text

    async def request_async(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
        token: Optional[str] = None,
    ) -> Any:
        """Run :meth:`rest_request` off the event loop so callers can gather requests."""
        return await asyncio.to_thread(
            self.rest_request, method, endpoint, params=params, data=data, token=token
        )
