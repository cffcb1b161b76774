"""
=============================================================================
DEMONSTRATION SCENARIOS
=============================================================================

Scripted walkthroughs printed by ``python -m requestchain``.

    chain    The end-to-end request chain scenario
    orders   The order workflow state machine
    factory  The regional vehicle factory

Each scenario takes a ``write`` callable (print by default) so tests can
capture the output, and returns what it observed.

=============================================================================
"""

import asyncio
from typing import Callable, List, Tuple

from .handlers import Handler
from .http import Request, Response, make_request
from .patterns import CarType, Order, OrderService, Region, build_car


Writer = Callable[[str], None]

USER = {"name": "John"}
TOKEN = "Bearer demo-token"
CLIENT = "client-1"


def _show(write: Writer, label: str, response: Response) -> None:
    cache = response.headers.get("X-Cache", "-")
    write(f"  {label:<38} → {int(response.status)} cache={cache:<4} body={response.body}")


async def run_chain_scenario(chain: Handler, write: Writer = print) -> List[Tuple[str, Response]]:
    """
    Walk the reference chain through its documented behaviour.

    1. POST /api/users with body, token and client id → 200, cached
    2. Immediate repeat                               → 200 from cache
    3. Same request without authorization             → 401
    4. Same request without body                      → 400
    5. Burst from the same client                     → 429 once the
                                                        window is full
    """
    results: List[Tuple[str, Response]] = []

    async def send(label: str, request: Request) -> Response:
        response = await chain.handle(request)
        _show(write, label, response)
        results.append((label, response))
        return response

    write("=== Request chain ===")
    await send("POST /api/users", make_request(
        "POST", "/api/users", body=USER, authorization=TOKEN, client_id=CLIENT))
    await send("POST /api/users (repeat)", make_request(
        "POST", "/api/users", body=USER, authorization=TOKEN, client_id=CLIENT))
    await send("POST /api/users (no authorization)", make_request(
        "POST", "/api/users", body=USER, client_id=CLIENT))
    await send("POST /api/users (no body)", make_request(
        "POST", "/api/users", authorization=TOKEN, client_id=CLIENT))

    write("--- burst from client-1 ---")
    burst = [
        chain.handle(make_request(
            "GET", f"/api/users/{n}", authorization=TOKEN, client_id=CLIENT))
        for n in range(6)
    ]
    for n, response in enumerate(await asyncio.gather(*burst)):
        label = f"GET /api/users/{n}"
        _show(write, label, response)
        results.append((label, response))

    return results


def run_order_scenario(service: OrderService, write: Writer = print) -> List[Order]:
    """Happy path for one order, then invalid actions, then a cancellation."""
    write("=== Order workflow ===")

    order = Order("ORD-001", ["Laptop", "Mouse"], 1299.99)
    for action in (service.process_order, service.ship_order, service.deliver_order):
        result = action(order)
        write(f"  {order.id}: {result.message} [{order.status_name}]")

    for attempt in (order.process, order.cancel):
        result = attempt()
        write(f"  {order.id}: {result.message} [{order.status_name}]")

    cancelled = Order("ORD-002", ["Keyboard"], 99.99)
    for action in (service.process_order, service.cancel_order, service.ship_order):
        result = action(cancelled)
        write(f"  {cancelled.id}: {result.message} [{cancelled.status_name}]")

    return [order, cancelled]


def run_factory_scenario(write: Writer = print) -> list:
    """Build every car type in every region."""
    write("=== Vehicle factory ===")
    cars = [build_car(region, car_type) for region in Region for car_type in CarType]
    for car in cars:
        write(f"  {car}")
    return cars
