"""
Adobe Commerce Product Export

Modules:
    models      - Data models (Category, InventoryRecord, PipelineMetrics)
    common      - Shared utilities (config loader, logging, CSV utils)
    cache       - Cache stores and the Commerce response cache
    commerce    - Commerce REST client, token, product, category and inventory fetchers
    enrichment  - Identifier extraction, joining and the pipeline orchestrator
    export      - RECS CSV export
"""
