"""
Car Doctor Backend — Order Service
====================================

What:  Create, list, confirm and delete orders.
How:   Each operation maps to a single store call. The service is
       stateless: the store and the caller's identity (when known) are
       passed in by the route.
Who:   The /orders route handlers.

Ownership Rules:
    list_orders     always requires an identity; the requested email must
                    equal the identity's email, otherwise ForbiddenError.
    create / mark_confirmed / delete
                    identity is None by default (unauthenticated writes).
                    When the route runs in strict mode it passes the
                    identity and the order's email must match it.
"""

import logging
from typing import List, Optional

from car_doctor.database import ORDERS, DocumentStore, to_object_id
from car_doctor.exceptions import ForbiddenError
from car_doctor.schemas.common import DeleteResult, InsertResult, UpdateResult
from car_doctor.schemas.order import Order, OrderCreate
from car_doctor.schemas.session import Identity

logger = logging.getLogger(__name__)


class OrderService:
    """
    Business logic layer for order operations.

    Responsibilities:
        - list_orders():    orders of the authenticated email
        - create_order():   insert a new order document
        - mark_confirmed(): set status=true on one order
        - delete_order():   remove one order
    """

    async def list_orders(
        self,
        store: DocumentStore,
        identity: Identity,
        email: Optional[str],
    ) -> List[Order]:
        """
        Return the orders belonging to `identity`.

        The email query parameter is compared, not substituted: a missing
        or different email is rejected rather than silently replaced.

        Raises:
            ForbiddenError: `email` differs from the session email.
        """
        if email != identity.email:
            logger.warning(
                "Order list rejected: requested email %r does not match session",
                email,
            )
            raise ForbiddenError(context={"requested_email": email})

        documents = await store.find(ORDERS, {"email": email})
        return [Order.model_validate(doc) for doc in documents]

    async def create_order(
        self,
        store: DocumentStore,
        payload: OrderCreate,
        identity: Optional[Identity] = None,
    ) -> InsertResult:
        if identity is not None and payload.email != identity.email:
            raise ForbiddenError(context={"order_email": payload.email})

        result = await store.insert_one(ORDERS, payload.to_document())
        logger.info("Order %s created for service %r", result.inserted_id, payload.service)
        return result

    async def mark_confirmed(
        self,
        store: DocumentStore,
        order_id: str,
        identity: Optional[Identity] = None,
    ) -> UpdateResult:
        """
        Flip `status` to true. Unknown ids yield matchedCount == 0.

        Raises:
            ValidationError: `order_id` is not a valid document id.
            ForbiddenError: strict mode and the order belongs to someone else.
        """
        object_id = to_object_id(order_id)
        if identity is not None:
            await self._check_owner(store, object_id, identity)

        result = await store.update_one(ORDERS, object_id, {"status": True})
        logger.info(
            "Order %s confirm: matched=%d modified=%d",
            order_id, result.matched_count, result.modified_count,
        )
        return result

    async def delete_order(
        self,
        store: DocumentStore,
        order_id: str,
        identity: Optional[Identity] = None,
    ) -> DeleteResult:
        object_id = to_object_id(order_id)
        if identity is not None:
            await self._check_owner(store, object_id, identity)

        result = await store.delete_one(ORDERS, object_id)
        logger.info("Order %s delete: deleted=%d", order_id, result.deleted_count)
        return result

    async def _check_owner(self, store: DocumentStore, object_id, identity: Identity) -> None:
        # Missing orders fall through so the write reports zero matches.
        existing = await store.find_one(ORDERS, object_id)
        if existing is not None and existing.get("email") != identity.email:
            logger.warning("Order %s write rejected: owned by another email", object_id)
            raise ForbiddenError(context={"order_id": str(object_id)})


order_service = OrderService()
