"""
Smaller design-pattern demonstrations that live alongside the request
chain: an order workflow state machine, a regional vehicle factory, and
process-scoped shared state.
"""

from .order_state import (
    Order,
    OrderAction,
    OrderService,
    OrderStatus,
    STATUS_NAMES,
    TransitionResult,
)
from .vehicles import Car, CarType, Region, REGION_FACTORIES, build_car
from .scope import ProcessScope

__all__ = [
    "Order",
    "OrderAction",
    "OrderService",
    "OrderStatus",
    "STATUS_NAMES",
    "TransitionResult",
    "Car",
    "CarType",
    "Region",
    "REGION_FACTORIES",
    "build_car",
    "ProcessScope",
]
