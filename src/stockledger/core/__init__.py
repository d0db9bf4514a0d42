# Core reconciliation and analytics components
# Stores are passed in; nothing in core touches files or databases directly

from .models import OwnerTag, Product, SaleEvent
from .parsers import (
    DateParser,
    OwnerTagResolver,
    clean_text,
    normalize_match_key,
    parse_amount,
    parse_amount_or_none,
    resolve_owner_tag,
)
from .columns import ColumnResolver, STOCK_COLUMNS, SALES_COLUMNS, resolve_field
from .quality import DataQualityReport, DataQualityChecker
from .reconciliation import CatalogMatcher, MatchType, ReconciliationResult, match_sold_quantities
from .catalog import CatalogIngestor
from .sales import SaleIngestor, is_delivered, select_items_sheet
from .attribution import compute_capital_split, compute_stats, split_amount
from .analysis import analyze_inventory, analyze_inventory_frame
from .reports import AnalyzedItem, CapitalSplit, IngestResult, InventoryReport, SalesStats

__all__ = [
    "OwnerTag",
    "Product",
    "SaleEvent",
    "DateParser",
    "OwnerTagResolver",
    "clean_text",
    "normalize_match_key",
    "parse_amount",
    "parse_amount_or_none",
    "resolve_owner_tag",
    "ColumnResolver",
    "STOCK_COLUMNS",
    "SALES_COLUMNS",
    "resolve_field",
    "DataQualityReport",
    "DataQualityChecker",
    "CatalogMatcher",
    "MatchType",
    "ReconciliationResult",
    "match_sold_quantities",
    "CatalogIngestor",
    "SaleIngestor",
    "is_delivered",
    "select_items_sheet",
    "compute_capital_split",
    "compute_stats",
    "split_amount",
    "analyze_inventory",
    "analyze_inventory_frame",
    "AnalyzedItem",
    "CapitalSplit",
    "IngestResult",
    "InventoryReport",
    "SalesStats",
]
