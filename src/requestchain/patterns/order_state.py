"""
=============================================================================
ORDER WORKFLOW STATE MACHINE
=============================================================================

An order moves through five states. Which action is allowed in which
state lives in one transition table instead of five state classes:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                       ORDER LIFECYCLE                               │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   PENDING ──process──► PROCESSING ──ship──► SHIPPED ──deliver──►    │
    │      │                     │                          DELIVERED     │
    │      └──────cancel─────────┴──cancel──► CANCELLED                   │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The current state is an explicit OrderStatus tag. Its display name comes
from STATUS_NAMES, never from a class name.

An action that is not allowed leaves the order untouched and returns a
TransitionResult with ok=False explaining why. Nothing is raised: like
the chain's 4xx responses, a refused transition is an expected outcome.

=============================================================================
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Tuple


logger = logging.getLogger(__name__)


class OrderStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class OrderAction(Enum):
    PROCESS = "process"
    CANCEL = "cancel"
    SHIP = "ship"
    DELIVER = "deliver"


STATUS_NAMES: Dict[OrderStatus, str] = {
    OrderStatus.PENDING: "Pending",
    OrderStatus.PROCESSING: "Processing",
    OrderStatus.SHIPPED: "Shipped",
    OrderStatus.DELIVERED: "Delivered",
    OrderStatus.CANCELLED: "Cancelled",
}


# (current status, action) → (next status, message). Missing pairs are refused.
TRANSITIONS: Dict[Tuple[OrderStatus, OrderAction], Tuple[OrderStatus, str]] = {
    (OrderStatus.PENDING, OrderAction.PROCESS): (OrderStatus.PROCESSING, "Processing order"),
    (OrderStatus.PENDING, OrderAction.CANCEL): (OrderStatus.CANCELLED, "Order cancelled"),
    (OrderStatus.PROCESSING, OrderAction.CANCEL): (OrderStatus.CANCELLED, "Cancelling order"),
    (OrderStatus.PROCESSING, OrderAction.SHIP): (OrderStatus.SHIPPED, "Shipping order"),
    (OrderStatus.SHIPPED, OrderAction.DELIVER): (OrderStatus.DELIVERED, "Delivering order"),
}

# Refusals whose wording differs from the generic "Cannot <action> <status> order".
_REFUSALS: Dict[Tuple[OrderStatus, OrderAction], str] = {
    (OrderStatus.PROCESSING, OrderAction.PROCESS): "Order already being processed",
    (OrderStatus.PROCESSING, OrderAction.DELIVER): "Cannot deliver order that hasn't been shipped",
    (OrderStatus.SHIPPED, OrderAction.PROCESS): "Order already shipped",
    (OrderStatus.SHIPPED, OrderAction.SHIP): "Order already shipped",
    (OrderStatus.DELIVERED, OrderAction.PROCESS): "Order already delivered",
    (OrderStatus.DELIVERED, OrderAction.SHIP): "Order already delivered",
    (OrderStatus.DELIVERED, OrderAction.DELIVER): "Order already delivered",
    (OrderStatus.CANCELLED, OrderAction.CANCEL): "Order already cancelled",
}


@dataclass(frozen=True)
class TransitionResult:
    ok: bool
    before: OrderStatus
    after: OrderStatus
    message: str


@dataclass
class Order:
    """An order and its current workflow status."""

    id: str
    items: List[str]
    total: float
    status: OrderStatus = OrderStatus.PENDING
    history: List[OrderStatus] = field(default_factory=list)

    @property
    def status_name(self) -> str:
        return STATUS_NAMES[self.status]

    def apply(self, action: OrderAction) -> TransitionResult:
        """Attempt ``action``; the status only changes if it is allowed."""
        before = self.status
        transition = TRANSITIONS.get((before, action))

        if transition is None:
            message = _REFUSALS.get(
                (before, action),
                f"Cannot {action.value} {STATUS_NAMES[before].lower()} order",
            )
            return TransitionResult(ok=False, before=before, after=before, message=message)

        after, message = transition
        self.history.append(before)
        self.status = after
        return TransitionResult(ok=True, before=before, after=after, message=message)

    def process(self) -> TransitionResult:
        return self.apply(OrderAction.PROCESS)

    def cancel(self) -> TransitionResult:
        return self.apply(OrderAction.CANCEL)

    def ship(self) -> TransitionResult:
        return self.apply(OrderAction.SHIP)

    def deliver(self) -> TransitionResult:
        return self.apply(OrderAction.DELIVER)


class OrderService:
    """Runs actions against orders and logs each outcome."""

    def run(self, order: Order, action: OrderAction) -> TransitionResult:
        logger.info(f"Order #{order.id}: {action.value} (current state: {order.status_name})")
        result = order.apply(action)
        if result.ok:
            logger.info(f"Order #{order.id}: {result.message} → {STATUS_NAMES[result.after]}")
        else:
            logger.warning(f"Order #{order.id}: {result.message}")
        return result

    def process_order(self, order: Order) -> TransitionResult:
        return self.run(order, OrderAction.PROCESS)

    def ship_order(self, order: Order) -> TransitionResult:
        return self.run(order, OrderAction.SHIP)

    def deliver_order(self, order: Order) -> TransitionResult:
        return self.run(order, OrderAction.DELIVER)

    def cancel_order(self, order: Order) -> TransitionResult:
        return self.run(order, OrderAction.CANCEL)
