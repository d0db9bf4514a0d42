"""End-to-end tests through the service facade."""

from datetime import datetime

import pandas as pd
import pytest

from stockledger import DecodeError, InventoryService
from stockledger.core.models import OwnerTag, Product
from stockledger.stores import SQLiteCatalogStore, SQLiteDatabase, SQLiteLedgerStore


class TestIngestAndQuery:
    def test_full_pipeline(self, service, stock_rows, order_rows):
        stock = service.ingest_stock(stock_rows)
        sales = service.ingest_sales(order_rows)

        assert stock.updated == 3
        assert sales.processed == 3
        assert len(service.list_products()) == 3

        stats = service.get_stats()
        assert stats.profit == pytest.approx(sales.total_profit)
        assert stats.count == 6
        # tip (Mine) 240, station (Other) 600, flux (Shared) 220
        assert stats.mine_share == pytest.approx(240 + 110)
        assert stats.other_share == pytest.approx(600 + 110)

    def test_cancelled_rows_never_reach_stats(self, service, stock_rows):
        service.ingest_stock(stock_rows)
        service.ingest_sales(
            [{"Товар": "Жало T12-BC2", "Статус": "Cancelled", "Кол-во": "5", "Цена продажи": "180"}]
        )

        assert service.list_sales() == []
        assert service.get_stats().profit == 0

    def test_second_sales_file_replaces_first(self, service, stock_rows, order_rows):
        service.ingest_stock(stock_rows)
        service.ingest_sales(order_rows)
        service.ingest_sales(
            [{"Товар": "Флюс RMA-223", "Статус": "Доставлен", "Кол-во": "4", "Цена продажи": "260"}]
        )

        sales = service.list_sales()
        assert [s.product_name for s in sales] == ["Флюс RMA-223"]
        assert sales[0].quantity == 4

    def test_list_sales_newest_first(self, service):
        service.ingest_sales(
            [
                {"Дата": "01.02.2024", "Товар": "a", "Статус": "Доставлен"},
                {"Дата": "03.02.2024", "Товар": "b", "Статус": "Доставлен"},
                {"Дата": "02.02.2024", "Товар": "c", "Статус": "Доставлен"},
            ]
        )
        assert [s.product_name for s in service.list_sales()] == ["b", "c", "a"]
        assert service.list_sales()[0].date == datetime(2024, 2, 3)

    def test_capital_split(self, service, catalog):
        catalog.upsert(Product(name="Станция", quantity=2, buying_price=500, owner=OwnerTag.OTHER))
        split = service.get_capital_split()

        assert split.other_capital == 1000
        assert split.mine_capital == 0

    def test_analyze_inventory(self, service, stock_rows, order_rows):
        service.ingest_stock(stock_rows)
        service.ingest_sales(order_rows)
        report = service.analyze_inventory()

        items = {item.name: item for item in report.items}
        tip = items["Жало T12-BC2"]
        assert tip.velocity == pytest.approx(3 / 90)
        assert tip.fast_consumable is True
        assert tip.rop == 35
        assert tip.status == "reorder"
        assert report.items[0].name == "Жало T12-BC2"

    def test_clear_catalog(self, service, stock_rows):
        service.ingest_stock(stock_rows)
        service.clear_catalog()
        assert service.list_products() == []


class TestFiles:
    @pytest.fixture
    def stock_file(self, tmp_path, stock_rows):
        path = tmp_path / "stock.xlsx"
        pd.DataFrame(stock_rows).to_excel(path, index=False)
        return path

    @pytest.fixture
    def orders_file(self, tmp_path, order_rows):
        path = tmp_path / "orders.xlsx"
        with pd.ExcelWriter(path) as writer:
            pd.DataFrame([{"Номер": 1}]).to_excel(writer, sheet_name="Заказы", index=False)
            pd.DataFrame(order_rows).to_excel(writer, sheet_name="Позиции", index=False)
        return path

    def test_ingest_files(self, service, stock_file, orders_file):
        assert service.ingest_stock_file(stock_file).updated == 3
        result = service.ingest_sales_file(orders_file)

        assert result.processed == 3
        assert result.total_profit == pytest.approx(1060)

    def test_bad_sales_file_keeps_previous_ledger(self, service, stock_rows, order_rows, tmp_path):
        service.ingest_stock(stock_rows)
        service.ingest_sales(order_rows)
        broken = tmp_path / "orders.xlsx"
        broken.write_bytes(b"garbage")

        with pytest.raises(DecodeError):
            service.ingest_sales_file(broken)
        assert len(service.list_sales()) == 3


def test_sqlite_backed_service(tmp_path, stock_rows, order_rows):
    db = SQLiteDatabase(tmp_path / "ledger.db")
    service = InventoryService(SQLiteCatalogStore(db), SQLiteLedgerStore(db))

    service.ingest_stock(stock_rows)
    service.ingest_stock(stock_rows)
    service.ingest_sales(order_rows)

    assert len(service.list_products()) == 3
    assert service.get_stats().profit == pytest.approx(1060)
    db.close()
