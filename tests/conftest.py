from datetime import date, datetime, timedelta
from decimal import Decimal
from zoneinfo import ZoneInfo

import pytest
from fastapi.testclient import TestClient

from app.db.store import InvoiceStore
from app.main import create_app
from app.models.invoices import InvoiceCreate
from app.models.rms import RMCreate

TZ = ZoneInfo("Asia/Kolkata")
NOW = datetime(2026, 10, 19, 10, 30, tzinfo=TZ)
TODAY = NOW.date()


class FrozenClock:
    def __init__(self, now: datetime = NOW):
        self.current = now

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current = self.current + timedelta(**kwargs)


def make_invoice(
    customer_name: str = "Acme Traders",
    due_date: date = TODAY + timedelta(days=30),
    unit_amount: str = "1000",
    **extra,
) -> InvoiceCreate:
    return InvoiceCreate(
        customer_name=customer_name,
        due_date=due_date,
        unit_amount=Decimal(unit_amount),
        **extra,
    )


def make_rm(name: str, **extra) -> RMCreate:
    email = name.lower().replace(" ", ".") + "@company.com"
    return RMCreate(name=name, email=email, **extra)


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def store(clock):
    return InvoiceStore(clock=clock)


@pytest.fixture
def two_rms(store):
    r1 = store.add_rm(make_rm("Ravi Kumar"))
    r2 = store.add_rm(make_rm("Sarah Johnson"))
    return r1, r2


@pytest.fixture
def client(clock):
    app = create_app(seed_mock_rms=False, clock=clock)
    with TestClient(app) as c:
        yield c
