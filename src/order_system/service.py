"""
Order workflows that bridge local orders to Reddio Pay payments.
"""

from __future__ import annotations

import logging
import secrets
import sqlite3
from contextlib import contextmanager
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterator, List, Optional, Protocol, Tuple

from reddio_pay import (
    ExternalCreatePaymentRequest,
    ExternalPayment,
    Payment,
    ReddioPayError,
)

from .database import Order, OrderRepository, OrderStatus

__all__ = ["OrderError", "OrderNotFound", "OrderService", "PaymentGateway"]

logger = logging.getLogger(__name__)

_CENTS = Decimal("0.01")

_ORDER_NUMBER_ATTEMPTS = 5


class PaymentGateway(Protocol):
    """The part of :class:`reddio_pay.ReddioPayClient` the order system uses."""

    def external_create_payment(self, request: ExternalCreatePaymentRequest) -> ExternalPayment:
        ...

    def get_payment(self, payment_id: str) -> Payment:
        ...


class OrderError(Exception):
    """An order workflow could not be completed."""


class OrderNotFound(OrderError):
    def __init__(self, order_ref: object) -> None:
        self.order_ref = order_ref
        super().__init__(f"Order {order_ref} not found")


@contextmanager
def _storage(action: str) -> Iterator[None]:
    """Re-raise SQLite failures as :class:`OrderError`."""
    try:
        yield
    except sqlite3.Error as exc:
        raise OrderError(f"Failed to {action}: {exc}") from exc


class OrderService:
    def __init__(
        self,
        repository: OrderRepository,
        gateway: PaymentGateway,
        *,
        unit_price: Decimal = Decimal("100.00"),
    ) -> None:
        self.repository = repository
        self.gateway = gateway
        self.unit_price = unit_price

    @staticmethod
    def generate_order_number() -> str:
        return f"ORD{secrets.randbelow(100_000_000):08d}"

    def total_amount(self, quantity: int) -> str:
        # Flat unit price; the remote product price is not consulted.
        return str((self.unit_price * quantity).quantize(_CENTS, rounding=ROUND_HALF_UP))

    def create_order(
        self,
        customer_name: str,
        customer_email: str,
        product_id: str,
        product_token_id: str,
        quantity: int,
    ) -> Order:
        """
        Store a pending order and open an external payment for it.

        When the payment cannot be created the order is kept as ``failed``
        and :class:`OrderError` is raised.
        """
        order = self._insert_order(
            customer_name=customer_name,
            customer_email=customer_email,
            product_id=product_id,
            product_token_id=product_token_id,
            quantity=quantity,
            total_amount=self.total_amount(quantity),
        )

        logger.info("Creating external payment for order %s", order.order_number)
        try:
            payment = self.gateway.external_create_payment(
                ExternalCreatePaymentRequest(
                    product_id=product_id,
                    product_token_id=product_token_id,
                    count=quantity,
                )
            )
        except ReddioPayError as exc:
            with _storage("mark order as failed"):
                self.repository.set_status(order.id, OrderStatus.FAILED)
            raise OrderError(f"Failed to create Reddio Pay payment: {exc}") from exc

        with _storage("store payment details"):
            self.repository.attach_payment(
                order.id, payment.payment_id, payment.pay_link, "created"
            )
        order.reddio_payment_id = payment.payment_id
        order.reddio_pay_link = payment.pay_link
        order.reddio_status = "created"

        logger.info(
            "Order %s created with Reddio Pay payment %s",
            order.order_number,
            payment.payment_id,
        )
        return order

    def _insert_order(self, **fields) -> Order:
        """Insert a new order, drawing a fresh order number on each clash."""
        for _ in range(_ORDER_NUMBER_ATTEMPTS):
            order_number = self.generate_order_number()
            try:
                return self.repository.insert(order_number=order_number, **fields)
            except sqlite3.IntegrityError:
                logger.warning("Order number %s already taken, drawing another", order_number)
            except sqlite3.Error as exc:
                raise OrderError(f"Failed to store order: {exc}") from exc
        raise OrderError(
            f"Failed to store order: no free order number after {_ORDER_NUMBER_ATTEMPTS} attempts"
        )

    def get_order(self, order_id: int) -> Order:
        with _storage("load order"):
            order = self.repository.get(order_id)
        if order is None:
            raise OrderNotFound(order_id)
        return order

    def get_order_by_number(self, order_number: str) -> Order:
        with _storage("load order"):
            order = self.repository.get_by_number(order_number)
        if order is None:
            raise OrderNotFound(order_number)
        return order

    def list_orders(
        self,
        page: int = 1,
        limit: int = 10,
        status: Optional[str] = None,
    ) -> Tuple[List[Order], int]:
        with _storage("list orders"):
            return self.repository.list(page=page, limit=limit, status=status)

    def check_payment_status(self, order_id: int) -> Order:
        """Pull the remote payment state into the local order and return it."""
        order = self.get_order(order_id)
        if not order.reddio_payment_id:
            raise OrderError(f"No Reddio Pay payment ID found for order {order_id}")

        logger.info("Checking payment status for payment %s", order.reddio_payment_id)
        try:
            payment = self.gateway.get_payment(order.reddio_payment_id)
        except ReddioPayError as exc:
            raise OrderError(f"Failed to get payment status from Reddio Pay: {exc}") from exc

        with _storage("update payment status"):
            if payment.is_paid and order.status != OrderStatus.PAID:
                self.repository.mark_paid(order.id, payment.status, payment.transaction_hash)
            else:
                self.repository.set_reddio_status(order.id, payment.status)
        return self.get_order(order_id)
