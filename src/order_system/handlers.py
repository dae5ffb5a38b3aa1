"""
REST routes of the order system.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

from flask import Flask, jsonify, request

from .database import Order
from .service import OrderError, OrderNotFound, OrderService

__all__ = ["create_app"]

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = (
    "customer_name",
    "customer_email",
    "product_id",
    "product_token_id",
)


def _error(message: str, status: int) -> Tuple[Any, int]:
    return jsonify({"error": message}), status


def _status_view(order: Order) -> Dict[str, Any]:
    return {
        "order_number": order.order_number,
        "status": order.status,
        "reddio_status": order.reddio_status,
        "reddio_pay_link": order.reddio_pay_link,
        "transaction_hash": order.transaction_hash,
        "paid_at": order.paid_at,
    }


def _int_arg(name: str, default: int) -> int:
    try:
        return int(request.args.get(name, default))
    except ValueError:
        return default


def _order_id(raw: str) -> Optional[int]:
    # ASCII digits only; "²" passes isdigit() but not int()
    return int(raw) if raw.isdecimal() and raw.isascii() else None


def create_app(service: OrderService) -> Flask:
    app = Flask(__name__)
    app.config["ORDER_SERVICE"] = service

    @app.post("/api/orders")
    def create_order():
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return _error("Invalid JSON body", 400)

        quantity = data.get("quantity")
        if (
            any(not isinstance(data.get(name), str) or not data[name] for name in _REQUIRED_FIELDS)
            or not isinstance(quantity, int)
            or isinstance(quantity, bool)
            or quantity < 1
        ):
            return _error("Missing required fields or invalid quantity", 400)

        try:
            order = service.create_order(
                data["customer_name"],
                data["customer_email"],
                data["product_id"],
                data["product_token_id"],
                quantity,
            )
        except OrderError as exc:
            logger.error("Order creation failed: %s", exc)
            return _error(str(exc), 500)
        return jsonify({"order": order.to_dict()}), 201

    @app.get("/api/orders/<order_id>")
    def get_order(order_id: str):
        parsed = _order_id(order_id)
        if parsed is None:
            return _error("Invalid order ID", 400)
        try:
            order = service.get_order(parsed)
        except OrderNotFound:
            return _error("Order not found", 404)
        except OrderError as exc:
            logger.error("Order lookup failed: %s", exc)
            return _error(str(exc), 500)
        return jsonify({"order": order.to_dict()})

    @app.get("/api/orders/<order_id>/status")
    def get_order_status(order_id: str):
        parsed = _order_id(order_id)
        if parsed is None:
            return _error("Invalid order ID", 400)
        try:
            order = service.get_order(parsed)
        except OrderNotFound:
            return _error("Order not found", 404)
        except OrderError as exc:
            logger.error("Order lookup failed: %s", exc)
            return _error(str(exc), 500)
        return jsonify(_status_view(order))

    @app.post("/api/orders/<order_id>/check-payment")
    def check_payment(order_id: str):
        parsed = _order_id(order_id)
        if parsed is None:
            return _error("Invalid order ID", 400)
        try:
            order = service.check_payment_status(parsed)
        except OrderNotFound:
            return _error("Order not found", 404)
        except OrderError as exc:
            logger.error("Payment check failed: %s", exc)
            return _error(str(exc), 500)

        view = _status_view(order)
        view.pop("reddio_pay_link")
        view["message"] = "Payment status updated"
        return jsonify(view)

    @app.get("/api/orders")
    def list_orders():
        page = max(_int_arg("page", 1), 1)
        limit = _int_arg("limit", 10)
        if limit < 1 or limit > 100:
            limit = 10
        status = request.args.get("status") or None

        try:
            orders, total = service.list_orders(page, limit, status)
        except OrderError as exc:
            logger.error("Order listing failed: %s", exc)
            return _error(str(exc), 500)
        return jsonify(
            {
                "orders": [order.to_dict() for order in orders],
                "pagination": {
                    "page": page,
                    "limit": limit,
                    "total": total,
                    "total_pages": (total + limit - 1) // limit,
                },
            }
        )

    return app
