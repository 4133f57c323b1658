"""
Pipeline result models.

Per-item fetch outcomes, run metrics, and the final pipeline result.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List


class OutcomeStatus(str, Enum):
    SUCCESS = "success"
    DEFAULTED = "defaulted"


@dataclass
class FetchOutcome:
    """
    Outcome of one category lookup or one inventory batch.

    A DEFAULTED outcome means the data was replaced by defaults
    (placeholder category name, zero stock) instead of failing the run.
    """
    key: str
    status: OutcomeStatus = OutcomeStatus.SUCCESS
    reason: str = ""

    @classmethod
    def success(cls, key: str) -> "FetchOutcome":
        return cls(key=key)

    @classmethod
    def defaulted(cls, key: str, reason: str) -> "FetchOutcome":
        return cls(key=key, status=OutcomeStatus.DEFAULTED, reason=reason)

    @property
    def is_defaulted(self) -> bool:
        return self.status is OutcomeStatus.DEFAULTED

    def describe(self) -> str:
        return f"{self.key}: {self.reason}" if self.reason else self.key


@dataclass
class PipelineMetrics:
    """API call and cache hit counters for one pipeline run."""
    admin_token_api_calls: int = 0
    products_api_calls: int = 0
    categories_api_calls: int = 0
    inventory_api_calls: int = 0

    admin_token_cache_hits: int = 0
    products_cache_hits: int = 0
    categories_cache_hits: int = 0
    inventory_cache_hits: int = 0

    product_pages: int = 0
    inventory_batches: int = 0
    token_retries: int = 0

    @property
    def total_api_calls(self) -> int:
        return (self.admin_token_api_calls + self.products_api_calls
                + self.categories_api_calls + self.inventory_api_calls)

    @property
    def cache_hits(self) -> int:
        return (self.admin_token_cache_hits + self.products_cache_hits
                + self.categories_cache_hits + self.inventory_cache_hits)

    def reset_stages(self) -> None:
        """
        Clear everything except the admin token counters.

        Called before a retry: token calls add up across attempts,
        stage counters describe the attempt that produced the result.
        """
        self.products_api_calls = 0
        self.categories_api_calls = 0
        self.inventory_api_calls = 0
        self.products_cache_hits = 0
        self.categories_cache_hits = 0
        self.inventory_cache_hits = 0
        self.product_pages = 0
        self.inventory_batches = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "api_calls": {
                "total": self.total_api_calls,
                "admin_token": self.admin_token_api_calls,
                "products": self.products_api_calls,
                "categories": self.categories_api_calls,
                "inventory": self.inventory_api_calls,
            },
            "cache_hits": self.cache_hits,
            "product_pages": self.product_pages,
            "inventory_batches": self.inventory_batches,
            "token_retries": self.token_retries,
        }


@dataclass
class PipelineResult:
    """Enriched products plus run metrics and degradation warnings."""
    products: List[Dict[str, Any]]
    metrics: PipelineMetrics
    warnings: List[str] = field(default_factory=list)
