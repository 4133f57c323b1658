"""
Data models for the product export.

This module contains pure data classes with no business logic.
"""

from .catalog import AdminCredentials, Category, InventoryRecord, normalize_category_id
from .pipeline import FetchOutcome, OutcomeStatus, PipelineMetrics, PipelineResult

__all__ = [
    'AdminCredentials',
    'Category',
    'InventoryRecord',
    'normalize_category_id',
    'FetchOutcome',
    'OutcomeStatus',
    'PipelineMetrics',
    'PipelineResult',
]
