import pytest

from stockledger import InventoryService, PipelineSettings
from stockledger.stores import InMemoryCatalogStore, InMemoryLedgerStore


@pytest.fixture
def settings():
    return PipelineSettings()


@pytest.fixture
def catalog():
    return InMemoryCatalogStore()


@pytest.fixture
def ledger():
    return InMemoryLedgerStore()


@pytest.fixture
def service(catalog, ledger, settings):
    return InventoryService(catalog, ledger, settings)


@pytest.fixture
def stock_rows():
    """Stock export rows as the decoder hands them over (headers as typed by the shop)."""
    return [
        {
            "Название": "Жало T12-BC2",
            "Артикул": "T12BC2",
            "В наличии": "10",
            "Цена закупки": "100",
            "Цена продажи": "180",
            "Категория": "Жала",
            "Доля": "Я, Богдан",
        },
        {
            "Название": "Паяльная станция FNIRSI",
            "Артикул": 55012.0,
            "В наличии": "2",
            "Цена закупки": "1 800,00 ₴",
            "Цена продажи": "2 400",
            "Категория": None,
            "Доля": "Отец",
        },
        {
            "Название": "Флюс RMA-223",
            "Артикул": "",
            "В наличии": "5",
            "Цена закупки": "200",
            "Цена продажи": "260",
            "Категория": "Химия",
            "Доля": "50/50",
        },
        {
            "Название": None,
            "Артикул": "ORPHAN",
            "В наличии": "1",
            "Цена закупки": "1",
            "Цена продажи": "2",
            "Категория": "",
            "Доля": "",
        },
    ]


@pytest.fixture
def order_rows():
    """Order export rows: two delivered, one completed, one cancelled."""
    return [
        {
            "Товар": "Жало T12-BC2",
            "Артикул": "T12BC2",
            "Статус": "Доставлен",
            "Кол-во": "3",
            "Цена продажи": "180",
        },
        {
            "Товар": "Паяльная станция FNIRSI",
            "Артикул": "",
            "Статус": "Выполнен",
            "Кол-во": "1",
            "Цена продажи": "2 400",
        },
        {
            "Товар": "Флюс RMA-223",
            "Артикул": None,
            "Статус": "доставлен",
            "Кол-во": "2",
            "Цена продажи": "260",
            "Себестоимость": "150",
        },
        {
            "Товар": "Жало T12-BC2",
            "Артикул": "T12BC2",
            "Статус": "Отменен",
            "Кол-во": "5",
            "Цена продажи": "180",
        },
    ]
