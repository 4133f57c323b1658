"""RECS CSV export of enriched products."""

from .recs_exporter import RECS_FIELDNAMES, RECS_HEADERS, RECS_PREAMBLE, RecsCSVExporter

__all__ = [
    'RecsCSVExporter',
    'RECS_FIELDNAMES',
    'RECS_HEADERS',
    'RECS_PREAMBLE',
]
