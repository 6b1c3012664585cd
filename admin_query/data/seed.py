from __future__ import annotations

from datetime import datetime, timedelta, timezone

UTC = timezone.utc
# Fixed anchor so seeded timestamps are reproducible.
NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


def _ms(delta: timedelta) -> int:
    return int((NOW - delta).timestamp() * 1000)


CUSTOMERS = [
    {
        "id": "CUS-001",
        "city": "Bristol",
        "country": "United Kingdom",
        "createdAt": _ms(timedelta(days=120)),
        "email": "carson.darrin@acme.io",
        "isReturning": True,
        "lastOrderDate": _ms(timedelta(days=2)),
        "name": "Acme Supplies",
        "orderValue": 1520.5,
        "orderedRecently": True,
        "ordersPlaced": 14,
        "phone": "+44 117 496 0000",
        "status": "active",
        "storeCredit": 0,
    },
    {
        "id": "CUS-002",
        "city": "Madrid",
        "country": "Spain",
        "createdAt": _ms(timedelta(days=90)),
        "email": "fran.perez@beta.es",
        "isReturning": False,
        "lastOrderDate": _ms(timedelta(days=40)),
        "name": "Beta Trading",
        "orderValue": 310.0,
        "orderedRecently": False,
        "ordersPlaced": 2,
        "phone": "+34 91 123 4567",
        "status": "active",
        "storeCredit": 25,
    },
    {
        "id": "CUS-003",
        "city": "Austin",
        "country": "United States",
        "createdAt": _ms(timedelta(days=30)),
        "email": "jie.yan@cornerstone.com",
        "isReturning": True,
        "lastOrderDate": None,
        "name": "Cornerstone Goods",
        "orderValue": 0,
        "orderedRecently": False,
        "ordersPlaced": 0,
        "phone": None,
        "status": "blocked",
        "storeCredit": 10,
    },
    {
        "id": "CUS-004",
        "city": "Berlin",
        "country": "Germany",
        "createdAt": _ms(timedelta(days=5)),
        "email": "anika.visser@delta.de",
        "isReturning": False,
        "lastOrderDate": _ms(timedelta(days=1)),
        "name": "Delta Works",
        "orderValue": 89.99,
        "orderedRecently": True,
        "ordersPlaced": 1,
        "phone": "+49 30 901820",
        "status": "active",
        "storeCredit": 0,
    },
]

ORDERS = [
    {
        "id": "ORD-0001",
        "courier": "DHL",
        "createdAt": _ms(timedelta(days=10)),
        "currency": "USD",
        "paymentMethod": "creditCard",
        "paymentStatus": "paid",
        "status": "complete",
        "totalAmount": 500.0,
        "updatedAt": _ms(timedelta(days=8)),
    },
    {
        "id": "ORD-0002",
        "courier": "UPS",
        "createdAt": _ms(timedelta(days=6)),
        "currency": "USD",
        "paymentMethod": "paypal",
        "paymentStatus": "paid",
        "status": "delivered",
        "totalAmount": 124.5,
        "updatedAt": _ms(timedelta(days=3)),
    },
    {
        "id": "ORD-0003",
        "courier": None,
        "createdAt": _ms(timedelta(days=2)),
        "currency": "EUR",
        "paymentMethod": "stripe",
        "paymentStatus": "pending",
        "status": "processed",
        "totalAmount": 0,
        "updatedAt": None,
    },
    {
        "id": "ORD-0004",
        "courier": "FedEx",
        "createdAt": _ms(timedelta(hours=5)),
        "currency": "USD",
        "paymentMethod": "debit",
        "paymentStatus": "pending",
        "status": "placed",
        "totalAmount": 76.0,
        "updatedAt": None,
    },
]

INVOICES = [
    {
        "id": "INV-001",
        "currency": "USD",
        "dueDate": _ms(timedelta(days=-15)),
        "issueDate": _ms(timedelta(days=15)),
        "paymentMethod": "creditCard",
        "ref": "INV-2026-0001",
        "status": "ongoing",
        "totalAmount": 680.0,
    },
    {
        "id": "INV-002",
        "currency": "USD",
        "dueDate": _ms(timedelta(days=20)),
        "issueDate": _ms(timedelta(days=50)),
        "paidAt": _ms(timedelta(days=25)),
        "paymentMethod": "paypal",
        "ref": "INV-2026-0002",
        "status": "paid",
        "totalAmount": 1200.0,
    },
    {
        "id": "INV-003",
        "currency": "EUR",
        "dueDate": _ms(timedelta(days=3)),
        "issueDate": _ms(timedelta(days=33)),
        "paymentMethod": None,
        "ref": "INV-2026-0003",
        "status": "overdue",
        "totalAmount": 310.4,
    },
    {
        "id": "INV-004",
        "currency": "USD",
        "dueDate": _ms(timedelta(days=-30)),
        "issueDate": _ms(timedelta(days=1)),
        "paymentMethod": None,
        "ref": "INV-2026-0004",
        "status": "draft",
        "totalAmount": 45.0,
    },
]

PRODUCTS = [
    {
        "id": "PRD-001",
        "brand": "Healthcare Erbology",
        "category": "Healthcare",
        "createdAt": _ms(timedelta(days=60)),
        "currency": "USD",
        "name": "Erbology Aloe Vera",
        "price": 24.0,
        "sku": "401_1BBXBK",
        "status": "published",
        "updatedAt": _ms(timedelta(days=4)),
    },
    {
        "id": "PRD-002",
        "brand": "Lancome",
        "category": "Makeup",
        "createdAt": _ms(timedelta(days=45)),
        "currency": "USD",
        "name": "Lancome Rouge",
        "price": 95.0,
        "sku": "592_LDKDI",
        "status": "published",
        "updatedAt": None,
    },
    {
        "id": "PRD-003",
        "brand": None,
        "category": "Skincare",
        "createdAt": _ms(timedelta(days=20)),
        "currency": "USD",
        "name": "Ritual of Sakura",
        "price": 155.0,
        "sku": "321_UWEAJT",
        "status": "draft",
        "updatedAt": _ms(timedelta(days=1)),
    },
    {
        "id": "PRD-004",
        "brand": "Necessaire",
        "category": "Skincare",
        "createdAt": _ms(timedelta(days=3)),
        "currency": "USD",
        "name": "Necessaire Body Lotion",
        "price": 17.0,
        "sku": "121_LUSXFQ",
        "status": "archived",
        "updatedAt": None,
    },
]
