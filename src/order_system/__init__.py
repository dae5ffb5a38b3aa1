"""
Example order system that persists local orders and bridges them to
Reddio Pay payments.
"""

from .config import AppConfig, load_app_config
from .database import Order, OrderRepository, OrderStatus, init_db
from .handlers import create_app
from .service import OrderError, OrderNotFound, OrderService

__all__ = [
    "AppConfig",
    "Order",
    "OrderError",
    "OrderNotFound",
    "OrderRepository",
    "OrderService",
    "OrderStatus",
    "create_app",
    "init_db",
    "load_app_config",
]
