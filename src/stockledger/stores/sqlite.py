"""
SQLite-backed catalog and ledger.

Both stores can share one database file. Every driver error is re-raised
as StoreUnavailableError so callers see a single failure type regardless
of the backend.
"""

import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterable, Iterator

from ..core.models import Product, SaleEvent
from ..errors import StoreUnavailableError

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS products (
    name          TEXT PRIMARY KEY,
    article       TEXT NOT NULL DEFAULT '',
    quantity      INTEGER NOT NULL DEFAULT 0,
    buying_price  REAL NOT NULL DEFAULT 0,
    selling_price REAL NOT NULL DEFAULT 0,
    category      TEXT NOT NULL DEFAULT 'Warehouse',
    owner         TEXT NOT NULL DEFAULT 'Shared'
);
CREATE INDEX IF NOT EXISTS idx_products_article ON products(article);

CREATE TABLE IF NOT EXISTS sales (
    sale_id      INTEGER PRIMARY KEY AUTOINCREMENT,
    product_name TEXT NOT NULL,
    article      TEXT,
    quantity     INTEGER NOT NULL DEFAULT 0,
    sold_price   REAL NOT NULL DEFAULT 0,
    cost         REAL NOT NULL DEFAULT 0,
    profit       REAL NOT NULL DEFAULT 0,
    status       TEXT NOT NULL DEFAULT '',
    owner        TEXT NOT NULL DEFAULT 'Shared',
    order_id     TEXT,
    date         TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_sales_date ON sales(date);
"""

PRODUCT_COLUMNS = "name, article, quantity, buying_price, selling_price, category, owner"
SALE_COLUMNS = (
    "product_name, article, quantity, sold_price, cost, profit, status, owner, order_id, date"
)
INSERT_SALE = f"INSERT INTO sales ({SALE_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)"


class SQLiteDatabase:
    """A connection plus schema bootstrap, shared by the two stores."""

    def __init__(self, path: Path | str = ":memory:"):
        self.path = str(path)
        try:
            self.conn = sqlite3.connect(self.path, check_same_thread=False)
            self.conn.executescript(SCHEMA)
        except sqlite3.Error as exc:
            logger.exception("Cannot open store at %s", self.path)
            raise StoreUnavailableError(f"cannot open {self.path}: {exc}") from exc

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        try:
            with self.conn:
                yield self.conn
        except sqlite3.Error as exc:
            logger.exception("Store write failed on %s", self.path)
            raise StoreUnavailableError(str(exc)) from exc

    def query(self, sql: str, params: tuple = ()) -> list[tuple]:
        try:
            return self.conn.execute(sql, params).fetchall()
        except sqlite3.Error as exc:
            logger.exception("Store read failed on %s", self.path)
            raise StoreUnavailableError(str(exc)) from exc

    def close(self) -> None:
        self.conn.close()


def _product_from_row(row: tuple) -> Product:
    name, article, quantity, buying, selling, category, owner = row
    return Product(
        name=name,
        article=article,
        quantity=quantity,
        buying_price=buying,
        selling_price=selling,
        category=category,
        owner=owner,
    )


def _sale_from_row(row: tuple) -> SaleEvent:
    name, article, quantity, sold, cost, profit, status, owner, order_id, date = row
    return SaleEvent(
        product_name=name,
        article=article,
        quantity=quantity,
        sold_price=sold,
        cost=cost,
        profit=profit,
        status=status,
        owner=owner,
        order_id=order_id,
        date=datetime.fromisoformat(date),
    )


def _sale_params(e: SaleEvent) -> tuple:
    return (
        e.product_name,
        e.article,
        e.quantity,
        e.sold_price,
        e.cost,
        e.profit,
        e.status,
        e.owner.value,
        e.order_id,
        e.date.isoformat(),
    )


class SQLiteCatalogStore:
    def __init__(self, db: SQLiteDatabase):
        self.db = db

    def find_all(self) -> list[Product]:
        rows = self.db.query(f"SELECT {PRODUCT_COLUMNS} FROM products ORDER BY rowid")
        return [_product_from_row(r) for r in rows]

    def find_by_name(self, name: str) -> Product | None:
        rows = self.db.query(f"SELECT {PRODUCT_COLUMNS} FROM products WHERE name = ?", (name,))
        return _product_from_row(rows[0]) if rows else None

    def find_by_article(self, article: str) -> Product | None:
        if not article:
            return None
        rows = self.db.query(
            f"SELECT {PRODUCT_COLUMNS} FROM products WHERE article = ? ORDER BY rowid LIMIT 1",
            (article,),
        )
        return _product_from_row(rows[0]) if rows else None

    def upsert(self, product: Product) -> None:
        with self.db.transaction() as conn:
            conn.execute(
                f"""
                INSERT INTO products ({PRODUCT_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(name) DO UPDATE SET
                    article = excluded.article,
                    quantity = excluded.quantity,
                    buying_price = excluded.buying_price,
                    selling_price = excluded.selling_price,
                    category = excluded.category,
                    owner = excluded.owner
                """,
                (
                    product.name,
                    product.article,
                    product.quantity,
                    product.buying_price,
                    product.selling_price,
                    product.category,
                    product.owner.value,
                ),
            )

    def delete_all(self) -> None:
        with self.db.transaction() as conn:
            conn.execute("DELETE FROM products")


class SQLiteLedgerStore:
    def __init__(self, db: SQLiteDatabase):
        self.db = db

    def find_all(self) -> list[SaleEvent]:
        rows = self.db.query(f"SELECT {SALE_COLUMNS} FROM sales ORDER BY sale_id")
        return [_sale_from_row(r) for r in rows]

    def find_sorted_by_date_desc(self) -> list[SaleEvent]:
        rows = self.db.query(f"SELECT {SALE_COLUMNS} FROM sales ORDER BY date DESC, sale_id")
        return [_sale_from_row(r) for r in rows]

    def insert(self, event: SaleEvent) -> None:
        self.insert_many([event])

    def insert_many(self, events: Iterable[SaleEvent]) -> None:
        with self.db.transaction() as conn:
            conn.executemany(INSERT_SALE, [_sale_params(e) for e in events])

    def delete_all(self) -> None:
        with self.db.transaction() as conn:
            conn.execute("DELETE FROM sales")

    def replace_all(self, events: Iterable[SaleEvent]) -> None:
        """Swap the whole ledger in one transaction; a failed insert keeps the old rows."""
        params = [_sale_params(e) for e in events]
        with self.db.transaction() as conn:
            conn.execute("DELETE FROM sales")
            conn.executemany(INSERT_SALE, params)
