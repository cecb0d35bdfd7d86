from __future__ import annotations

import hashlib
import uuid
from dataclasses import dataclass
from datetime import date


def _det_uuid(*parts: str) -> str:
    h = hashlib.sha256("||".join(parts).encode("utf-8")).hexdigest()
    return str(uuid.UUID(h[:32]))


@dataclass(frozen=True)
class User:
    id: str
    name: str
    email: str
    # Plaintext here; hashed by the seeder before it is stored.
    password: str


@dataclass(frozen=True)
class Customer:
    id: str
    name: str
    email: str
    image_url: str


@dataclass(frozen=True)
class Invoice:
    customer_id: str
    # Minor currency units (cents).
    amount: int
    status: str
    date: date

    @property
    def id(self) -> str:
        """
        Content-derived id, so re-seeding the same invoice conflicts instead of duplicating.

        Two invoices with the same customer, amount, status and date get the same id, so a
        dataset listing such a pair stores a single row.
        """
        return _det_uuid("invoice", self.customer_id.lower(), str(self.amount), self.status, self.date.isoformat())


@dataclass(frozen=True)
class RevenueEntry:
    month: str
    revenue: int


@dataclass(frozen=True)
class PlaceholderDataset:
    users: tuple[User, ...] = ()
    customers: tuple[Customer, ...] = ()
    invoices: tuple[Invoice, ...] = ()
    revenue: tuple[RevenueEntry, ...] = ()


def placeholder_dataset() -> PlaceholderDataset:
    """Sample dashboard data used by the seed endpoint and the CLI."""
    users = (
        User(
            id="410544b2-4001-4271-9855-fec4b6a6442a",
            name="User",
            email="user@nextmail.com",
            password="123456",
        ),
    )

    customers = (
        Customer(
            id="d6e15727-9fe1-4961-8c5b-ea44a9bd81aa",
            name="Evil Rabbit",
            email="evil@rabbit.com",
            image_url="/customers/evil-rabbit.png",
        ),
        Customer(
            id="3958dc9e-712f-4377-85e9-fec4b6a6442a",
            name="Delba de Oliveira",
            email="delba@oliveira.com",
            image_url="/customers/delba-de-oliveira.png",
        ),
        Customer(
            id="3958dc9e-742f-4377-85e9-fec4b6a6442a",
            name="Lee Robinson",
            email="lee@robinson.com",
            image_url="/customers/lee-robinson.png",
        ),
        Customer(
            id="76d65c26-f784-44a2-ac19-586678f7c2f2",
            name="Michael Novotny",
            email="michael@novotny.com",
            image_url="/customers/michael-novotny.png",
        ),
        Customer(
            id="cc27c14a-0acf-4f4a-a6c9-d45682c144b9",
            name="Amy Burns",
            email="amy@burns.com",
            image_url="/customers/amy-burns.png",
        ),
        Customer(
            id="13d07535-c59e-4157-a011-f8d2ef4e0cbb",
            name="Balazs Orban",
            email="balazs@orban.com",
            image_url="/customers/balazs-orban.png",
        ),
    )

    c = customers
    invoices = (
        Invoice(customer_id=c[0].id, amount=15795, status="pending", date=date(2022, 12, 6)),
        Invoice(customer_id=c[1].id, amount=20348, status="pending", date=date(2022, 11, 14)),
        Invoice(customer_id=c[4].id, amount=3040, status="paid", date=date(2022, 10, 29)),
        Invoice(customer_id=c[3].id, amount=44800, status="paid", date=date(2023, 9, 10)),
        Invoice(customer_id=c[5].id, amount=34577, status="pending", date=date(2023, 8, 5)),
        Invoice(customer_id=c[2].id, amount=54246, status="pending", date=date(2023, 7, 16)),
        Invoice(customer_id=c[0].id, amount=666, status="pending", date=date(2023, 6, 27)),
        Invoice(customer_id=c[3].id, amount=32545, status="paid", date=date(2023, 6, 9)),
        Invoice(customer_id=c[4].id, amount=1250, status="paid", date=date(2023, 6, 17)),
        Invoice(customer_id=c[5].id, amount=8546, status="paid", date=date(2023, 6, 7)),
        Invoice(customer_id=c[1].id, amount=500, status="paid", date=date(2023, 8, 19)),
        Invoice(customer_id=c[5].id, amount=8945, status="paid", date=date(2023, 6, 3)),
        Invoice(customer_id=c[2].id, amount=1000, status="paid", date=date(2022, 6, 5)),
    )

    revenue = tuple(
        RevenueEntry(month=m, revenue=r)
        for m, r in [
            ("Jan", 2000),
            ("Feb", 1800),
            ("Mar", 2200),
            ("Apr", 2500),
            ("May", 2300),
            ("Jun", 3200),
            ("Jul", 3500),
            ("Aug", 3700),
            ("Sep", 2500),
            ("Oct", 2800),
            ("Nov", 3000),
            ("Dec", 4800),
        ]
    )

    return PlaceholderDataset(users=users, customers=customers, invoices=invoices, revenue=revenue)
