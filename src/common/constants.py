"""
Shared constants for the project.

This module contains application-wide constants that should have a single source of truth.
"""

# Stock status values written to enriched products
IN_STOCK = "IN_STOCK"
OUT_OF_STOCK = "OUT_OF_STOCK"

# Inventory source item status meaning "enabled / in stock"
SOURCE_ITEM_IN_STOCK = 1

# Commerce REST endpoints (relative to /rest/{version})
ADMIN_TOKEN_ENDPOINT = "integration/admin/token"
PRODUCTS_ENDPOINT = "products"
CATEGORY_LIST_ENDPOINT = "categories/list"
CATEGORY_ENDPOINT = "categories/{category_id}"
SOURCE_ITEMS_ENDPOINT = "inventory/source-items"
