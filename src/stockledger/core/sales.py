"""
Order file ingest: delivered order lines -> sale ledger.

Each sales report is treated as the full current truth: by default the
ledger is replaced, not appended to. All rows are resolved and matched
before the ledger is touched, so a file that fails to decode or match
leaves the previous ledger intact.
"""

import logging
from datetime import datetime
from typing import Any, Iterable, Mapping, Sequence

import pandas as pd

from ..config import PipelineSettings
from ..errors import DecodeError
from .columns import ColumnResolver, SALES_COLUMNS
from .models import OwnerTag, SaleEvent
from .parsers import DateParser, clean_text, parse_amount, parse_amount_or_none, parse_quantity
from .quality import DataQualityChecker, DataQualityReport
from .reconciliation import CatalogMatcher, ReconciliationResult
from .reports import IngestResult

logger = logging.getLogger(__name__)

Rows = Sequence[Mapping[str, Any]]


def select_items_sheet(
    sheets: Mapping[str, Rows], markers: Iterable[str] = ("позици", "items")
) -> tuple[str, Rows]:
    """
    Pick the sheet holding order lines.

    Prefers a sheet whose name contains an items marker; otherwise the
    first sheet. Raises DecodeError when there are no sheets at all.
    """
    if not sheets:
        raise DecodeError("workbook contains no sheets")

    lowered = [m.lower() for m in markers]
    for sheet_name, rows in sheets.items():
        if any(marker in str(sheet_name).lower() for marker in lowered):
            return sheet_name, rows

    sheet_name = next(iter(sheets))
    return sheet_name, sheets[sheet_name]


def is_delivered(status: str | None, terms: Iterable[str]) -> bool:
    """Case-insensitive substring test of the status against delivered/completed terms."""
    if not status:
        return False
    status = status.lower()
    return any(term.lower() in status for term in terms)


def _explicit_amount(raw) -> float | None:
    """
    An amount the order file supplied itself.

    Zero counts as not supplied: exports leave the cost/profit columns
    at 0 when the shop never filled them in.
    """
    value = parse_amount_or_none(raw)
    if value is None or value == 0:
        return None
    return value


class SaleIngestor:
    """
    Converts order rows into sale events matched against the catalog.

    Usage:
        ingestor = SaleIngestor(catalog_store, ledger_store)
        result = ingestor.ingest({"Позиции": rows, "Заказы": other_rows})
        result.processed, result.total_profit
    """

    def __init__(self, catalog, ledger, settings: PipelineSettings | None = None):
        self.catalog = catalog
        self.ledger = ledger
        self.settings = settings or PipelineSettings()
        self.resolver = ColumnResolver(SALES_COLUMNS)
        self.matcher = CatalogMatcher(catalog)
        self.date_parser = DateParser()

    def build_event(
        self, record: Mapping[str, Any], ingested_at: datetime, reconciliation: ReconciliationResult
    ) -> SaleEvent | None:
        """Match one resolved record and price it. None when it has no name."""
        name = clean_text(record.get("name"))
        if name is None:
            return None

        status = clean_text(record.get("status")) or ""
        quantity = parse_quantity(record.get("quantity"))
        sold_price = parse_amount(record.get("sold_price"))
        article = clean_text(record.get("article"))

        match = self.matcher.match(name, article)
        reconciliation.matches.append(match)

        owner = OwnerTag.SHARED
        cost = _explicit_amount(record.get("cost"))
        if match.product is not None:
            owner = match.product.owner
            if cost is None:
                cost = match.product.buying_price
        if cost is None:
            cost = 0.0

        profit = _explicit_amount(record.get("profit"))
        if profit is None:
            profit = (sold_price - cost) * quantity

        return SaleEvent(
            product_name=name,
            article=article,
            quantity=quantity,
            sold_price=sold_price,
            cost=cost,
            profit=profit,
            status=status,
            owner=owner,
            order_id=clean_text(record.get("order_id")),
            date=self.date_parser.parse(record.get("date")) or ingested_at,
        )

    def ingest(self, source: Rows | Mapping[str, Rows]) -> IngestResult:
        """Ingest a sheet mapping (sheet name -> rows) or a plain row list."""
        if isinstance(source, Mapping):
            sheet_name, rows = select_items_sheet(source, self.settings.items_sheet_markers)
            logger.debug("Reading order lines from sheet %r", sheet_name)
        else:
            rows = source

        records = [self.resolver.resolve(row) for row in rows]
        ingested_at = datetime.now()
        reconciliation = ReconciliationResult(source_name="orders", target_name="catalog")

        events: list[SaleEvent] = []
        skipped = 0
        dropped = 0
        for record in records:
            status = clean_text(record.get("status"))
            if clean_text(record.get("name")) is None:
                skipped += 1
                continue
            if not is_delivered(status, self.settings.delivered_terms):
                dropped += 1
                logger.debug("Dropping order line with status %r", status)
                continue
            events.append(self.build_event(record, ingested_at, reconciliation))

        if self.settings.ledger_mode == "replace":
            self.ledger.replace_all(events)
        else:
            self.ledger.insert_many(events)

        total_profit = sum(e.profit for e in events)
        report = self._check_quality(records)
        if report.has_critical_issues:
            logger.warning(
                "Order file has critical issues: %s",
                [i.description for i in report.critical_issues],
            )
        quality = report.summary()
        quality["matching"] = reconciliation.summary()

        logger.info(
            "Sales ingest: %d events written (profit %.2f), %d dropped by status, %d skipped, "
            "%d unmatched",
            len(events),
            total_profit,
            dropped,
            skipped,
            reconciliation.unmatched_records,
        )

        return IngestResult(
            processed=len(events),
            total_profit=total_profit,
            skipped=skipped,
            dropped=dropped,
            quality=quality,
        )

    def _check_quality(self, records: list[dict]) -> DataQualityReport:
        df = pd.DataFrame(records, columns=self.resolver.fields)
        checker = (
            DataQualityChecker("Orders")
            .check_resolved(["name", "status"])
            .check_missing("name")
            .check_numeric("quantity")
            .check_numeric("sold_price")
            .check_numeric("cost", severity="info")
            .check_numeric("profit", severity="info")
            .check_invalid_values(
                "date",
                lambda v: self.date_parser.parse(v) is not None,
                issue_type="unparsed_date",
            )
        )
        return checker.run(df)
