"""
Car Doctor Backend — Order Routes
===================================

What:  Order listing (authenticated) and order writes.

Authentication coverage:
    GET /orders is always protected and only returns the caller's orders.
    The write routes are open unless REQUIRE_AUTH_FOR_ORDER_WRITES is set;
    in that mode they need a session and may only touch the caller's own
    orders. The open default matches the frontend this API was built for
    and leaves orders writable by anyone who knows an id.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from car_doctor.database import DocumentStore, get_store
from car_doctor.middleware.auth import order_write_identity, require_identity
from car_doctor.schemas.common import DeleteResult, ErrorResponse, InsertResult, UpdateResult
from car_doctor.schemas.order import Order, OrderCreate, OrderStatusUpdate
from car_doctor.schemas.session import Identity
from car_doctor.services.order_service import order_service

router = APIRouter(prefix="/orders", tags=["Orders"])


@router.get(
    "",
    response_model=List[Order],
    responses={
        401: {"description": "Missing, invalid or expired session", "model": ErrorResponse},
        403: {"description": "Email does not match the session", "model": ErrorResponse},
    },
    summary="List the caller's orders",
)
async def list_orders(
    email: Optional[str] = Query(default=None, description="Must equal the session email"),
    identity: Identity = Depends(require_identity),
    store: DocumentStore = Depends(get_store),
) -> List[Order]:
    return await order_service.list_orders(store, identity=identity, email=email)


@router.post(
    "",
    response_model=InsertResult,
    summary="Place an order",
)
async def create_order(
    body: OrderCreate,
    identity: Optional[Identity] = Depends(order_write_identity),
    store: DocumentStore = Depends(get_store),
) -> InsertResult:
    return await order_service.create_order(store, body, identity=identity)


@router.put(
    "/status",
    response_model=UpdateResult,
    responses={400: {"description": "Malformed id", "model": ErrorResponse}},
    summary="Confirm an order (status=true)",
)
async def confirm_order(
    body: OrderStatusUpdate,
    identity: Optional[Identity] = Depends(order_write_identity),
    store: DocumentStore = Depends(get_store),
) -> UpdateResult:
    return await order_service.mark_confirmed(store, body.id, identity=identity)


@router.delete(
    "/{order_id}",
    response_model=DeleteResult,
    responses={400: {"description": "Malformed id", "model": ErrorResponse}},
    summary="Delete an order",
)
async def delete_order(
    order_id: str,
    identity: Optional[Identity] = Depends(order_write_identity),
    store: DocumentStore = Depends(get_store),
) -> DeleteResult:
    return await order_service.delete_order(store, order_id, identity=identity)
