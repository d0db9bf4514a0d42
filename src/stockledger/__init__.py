"""
stockledger: reconcile stock and order spreadsheet exports against a
product catalog, split profit and capital between two owners, and flag
items that need reordering.
"""

from .config import AnalyzerSettings, PipelineSettings
from .errors import DecodeError, ProcessingError, StoreUnavailableError
from .service import InventoryService

__all__ = [
    "AnalyzerSettings",
    "PipelineSettings",
    "DecodeError",
    "ProcessingError",
    "StoreUnavailableError",
    "InventoryService",
]
