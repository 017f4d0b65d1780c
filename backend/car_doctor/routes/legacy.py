"""
Car Doctor Backend — Legacy Route Aliases
===========================================

What:  The paths the first frontend release calls, served by the same
       handlers as the current routes.
When:  Mounted by create_app only when ENABLE_LEGACY_ROUTES is true.
       Hidden from the OpenAPI schema.

    POST   /jwt                    → POST   /session
    GET    /logout                 → GET    /session/logout
    GET    /orderlist              → GET    /orders
    POST   /order                  → POST   /orders
    PUT    /order/status/update    → PUT    /orders/status
    DELETE /order/delete/{id}      → DELETE /orders/{id}
"""

from typing import List

from fastapi import APIRouter

from car_doctor.routes import orders, session
from car_doctor.schemas.common import DeleteResult, InsertResult, UpdateResult
from car_doctor.schemas.order import Order
from car_doctor.schemas.session import LogoutResponse, SessionResponse

router = APIRouter(include_in_schema=False)

router.add_api_route(
    "/jwt", session.create_session, methods=["POST"], response_model=SessionResponse,
)
router.add_api_route(
    "/logout", session.logout, methods=["GET"], response_model=LogoutResponse,
)
router.add_api_route(
    "/orderlist", orders.list_orders, methods=["GET"], response_model=List[Order],
)
router.add_api_route(
    "/order", orders.create_order, methods=["POST"], response_model=InsertResult,
)
router.add_api_route(
    "/order/status/update", orders.confirm_order, methods=["PUT"], response_model=UpdateResult,
)
router.add_api_route(
    "/order/delete/{order_id}", orders.delete_order, methods=["DELETE"], response_model=DeleteResult,
)
