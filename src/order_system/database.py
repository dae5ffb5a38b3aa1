"""
SQLite persistence for local orders.
"""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

__all__ = ["Order", "OrderRepository", "OrderStatus", "init_db"]

_SCHEMA = """
CREATE TABLE IF NOT EXISTS orders (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    order_number TEXT UNIQUE NOT NULL,
    customer_name TEXT NOT NULL,
    customer_email TEXT NOT NULL,
    product_id TEXT NOT NULL,
    product_token_id TEXT NOT NULL,
    quantity INTEGER NOT NULL,
    total_amount TEXT NOT NULL,
    status TEXT NOT NULL DEFAULT 'pending',
    reddio_payment_id TEXT UNIQUE,
    reddio_pay_link TEXT,
    reddio_status TEXT,
    transaction_hash TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    paid_at TEXT
)
"""

_COLUMNS = (
    "id, order_number, customer_name, customer_email, product_id, "
    "product_token_id, quantity, total_amount, status, reddio_payment_id, "
    "reddio_pay_link, reddio_status, transaction_hash, created_at, updated_at, paid_at"
)


class OrderStatus:
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    CANCELLED = "cancelled"
    EXPIRED = "expired"


def utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class Order:
    """A local order and the remote payment it is bridged to."""

    id: int
    order_number: str
    customer_name: str
    customer_email: str
    product_id: str
    product_token_id: str
    quantity: int
    total_amount: str
    status: str
    created_at: str
    updated_at: str
    reddio_payment_id: Optional[str] = None
    reddio_pay_link: Optional[str] = None
    reddio_status: Optional[str] = None
    transaction_hash: Optional[str] = None
    paid_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "Order":
        return cls(**{key: row[key] for key in row.keys()})


def init_db(path: str | Path) -> "OrderRepository":
    """Create the ``orders`` table if needed and return a repository for it."""
    repository = OrderRepository(path)
    conn = repository.connect()
    try:
        with conn:
            conn.execute(_SCHEMA)
            conn.execute("CREATE INDEX IF NOT EXISTS idx_orders_status ON orders(status)")
    finally:
        conn.close()
    logger.info("Database initialized at %s", path)
    return repository


class OrderRepository:
    """
    Order storage on a SQLite file.

    Each operation opens its own connection, so one repository can be shared
    between request threads.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = str(path)

    def connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.path)
        conn.row_factory = sqlite3.Row
        return conn

    def _fetch_one(self, where: str, params: Tuple[Any, ...]) -> Optional[Order]:
        conn = self.connect()
        try:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM orders WHERE {where}", params
            ).fetchone()
        finally:
            conn.close()
        return Order.from_row(row) if row is not None else None

    def insert(
        self,
        *,
        order_number: str,
        customer_name: str,
        customer_email: str,
        product_id: str,
        product_token_id: str,
        quantity: int,
        total_amount: str,
        status: str = OrderStatus.PENDING,
    ) -> Order:
        now = utcnow()
        conn = self.connect()
        try:
            with conn:
                cursor = conn.execute(
                    """
                    INSERT INTO orders (
                        order_number, customer_name, customer_email, product_id,
                        product_token_id, quantity, total_amount, status,
                        created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        order_number,
                        customer_name,
                        customer_email,
                        product_id,
                        product_token_id,
                        quantity,
                        total_amount,
                        status,
                        now,
                        now,
                    ),
                )
                order_id = cursor.lastrowid
        finally:
            conn.close()

        return Order(
            id=order_id,
            order_number=order_number,
            customer_name=customer_name,
            customer_email=customer_email,
            product_id=product_id,
            product_token_id=product_token_id,
            quantity=quantity,
            total_amount=total_amount,
            status=status,
            created_at=now,
            updated_at=now,
        )

    def get(self, order_id: int) -> Optional[Order]:
        return self._fetch_one("id = ?", (order_id,))

    def get_by_number(self, order_number: str) -> Optional[Order]:
        return self._fetch_one("order_number = ?", (order_number,))

    def list(
        self,
        *,
        page: int = 1,
        limit: int = 10,
        status: Optional[str] = None,
    ) -> Tuple[List[Order], int]:
        """Return one page of orders, newest first, and the total matching count."""
        where = ""
        params: Tuple[Any, ...] = ()
        if status:
            where = "WHERE status = ?"
            params = (status,)

        conn = self.connect()
        try:
            total = conn.execute(f"SELECT COUNT(*) FROM orders {where}", params).fetchone()[0]
            rows = conn.execute(
                f"SELECT {_COLUMNS} FROM orders {where} "
                "ORDER BY created_at DESC, id DESC LIMIT ? OFFSET ?",
                params + (limit, (page - 1) * limit),
            ).fetchall()
        finally:
            conn.close()
        return [Order.from_row(row) for row in rows], total

    def _update(self, order_id: int, **fields: Any) -> None:
        fields["updated_at"] = utcnow()
        assignments = ", ".join(f"{name} = ?" for name in fields)
        conn = self.connect()
        try:
            with conn:
                conn.execute(
                    f"UPDATE orders SET {assignments} WHERE id = ?",
                    tuple(fields.values()) + (order_id,),
                )
        finally:
            conn.close()

    def attach_payment(self, order_id: int, payment_id: str, pay_link: str, reddio_status: str) -> None:
        self._update(
            order_id,
            reddio_payment_id=payment_id,
            reddio_pay_link=pay_link,
            reddio_status=reddio_status,
        )

    def set_status(self, order_id: int, status: str) -> None:
        self._update(order_id, status=status)

    def set_reddio_status(self, order_id: int, reddio_status: str) -> None:
        self._update(order_id, reddio_status=reddio_status)

    def mark_paid(self, order_id: int, reddio_status: str, transaction_hash: Optional[str]) -> None:
        self._update(
            order_id,
            status=OrderStatus.PAID,
            reddio_status=reddio_status,
            transaction_hash=transaction_hash,
            paid_at=utcnow(),
        )
