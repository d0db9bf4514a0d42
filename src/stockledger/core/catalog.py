"""
Stock file ingest: warehouse rows -> catalog upserts.

Products are upserted by name. Items missing from a new stock file stay
in the catalog; re-ingesting the same file leaves the catalog unchanged.
"""

import logging
from typing import Any, Iterable, Mapping

import pandas as pd

from ..config import PipelineSettings
from .columns import ColumnResolver, STOCK_COLUMNS
from .models import Product
from .parsers import OwnerTagResolver, clean_text, parse_amount, parse_quantity
from .quality import DataQualityChecker, DataQualityReport
from .reports import IngestResult

logger = logging.getLogger(__name__)


class CatalogIngestor:
    """
    Converts resolved stock rows into catalog entries.

    Usage:
        ingestor = CatalogIngestor(catalog_store)
        result = ingestor.ingest(rows)
        result.updated, result.skipped
    """

    def __init__(self, catalog, settings: PipelineSettings | None = None):
        self.catalog = catalog
        self.settings = settings or PipelineSettings()
        self.resolver = ColumnResolver(STOCK_COLUMNS)
        self.owner_resolver = OwnerTagResolver(
            self.settings.mine_markers, self.settings.other_markers
        )

    def to_product(self, record: Mapping[str, Any]) -> Product | None:
        """Build a Product from a resolved record; None when it has no name."""
        name = clean_text(record.get("name"))
        if name is None:
            return None

        return Product(
            name=name,
            article=clean_text(record.get("article")) or "",
            quantity=parse_quantity(record.get("quantity")),
            buying_price=max(0.0, parse_amount(record.get("buying_price"))),
            selling_price=max(0.0, parse_amount(record.get("selling_price"))),
            category=clean_text(record.get("category")) or self.settings.default_category,
            owner=self.owner_resolver.resolve(record.get("owner")),
        )

    def ingest(self, rows: Iterable[Mapping[str, Any]]) -> IngestResult:
        records = [self.resolver.resolve(row) for row in rows]

        updated = 0
        skipped = 0
        for record in records:
            product = self.to_product(record)
            if product is None:
                skipped += 1
                logger.debug("Skipping stock row without a name: %s", record)
                continue
            self.catalog.upsert(product)
            updated += 1

        quality = self._check_quality(records)
        if quality.has_critical_issues:
            logger.warning(
                "Stock file has critical issues: %s",
                [i.description for i in quality.critical_issues],
            )
        logger.info("Stock ingest: %d products upserted, %d rows skipped", updated, skipped)

        return IngestResult(updated=updated, skipped=skipped, quality=quality.summary())

    def _check_quality(self, records: list[dict]) -> DataQualityReport:
        df = pd.DataFrame(records, columns=self.resolver.fields)
        checker = (
            DataQualityChecker("Stock")
            .check_resolved(["name"])
            .check_missing("name")
            .check_numeric("quantity")
            .check_numeric("buying_price")
            .check_numeric("selling_price")
            .check_invalid_values(
                "owner", self.owner_resolver.is_recognised, issue_type="unknown_owner"
            )
        )
        return checker.run(df)
