# darkfixtures/__init__.py
"""
Dark Pool Fixtures — randomized, self-consistent test data.

Export the primary types and generators for convenience.
"""
from .models import CoExp, Computation, Order, OrderType, Parity, Settlement, Tokens
from .network import Config, MultiAddress
from .core import (
    less_random_co_exp,
    random_32_bytes,
    random_co_exp,
    random_computation,
    random_configs,
    random_buy_order,
    random_network_id,
    random_order,
    random_order_match,
    random_sell_order,
)

__all__ = [
    "CoExp",
    "Computation",
    "Order",
    "OrderType",
    "Parity",
    "Settlement",
    "Tokens",
    "Config",
    "MultiAddress",
    "random_co_exp",
    "less_random_co_exp",
    "random_order",
    "random_buy_order",
    "random_sell_order",
    "random_order_match",
    "random_configs",
    "random_32_bytes",
    "random_network_id",
    "random_computation",
]

__version__ = "0.1.0"
