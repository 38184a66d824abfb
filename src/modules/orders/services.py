"""Order service layer (Use Cases).

Orchestrates customer order placement and the seller/driver status
operations.  All write operations are atomic; the service defines the
unit-of-work boundary.

Business rules enforced:
- Orders are only accepted for active events (event row locked).
- Products are referenced by display name and locked in primary-key
  order, so concurrent orders touching the same products serialize
  without deadlocking and never oversell.
- Untracked stock (``stock_qty`` NULL) is never checked nor decremented.
- A rejected order leaves no trace: no stock change, no order row.
- Low-stock alerts are queued only once the order has committed.
- Status transitions follow ``VALID_TRANSITIONS``; cancelling does not
  restore stock.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog
from django.db import models, transaction
from django.utils import timezone

from modules.orders.constants import NO_PREFERENCE, DeliveryMode, OrderStatus
from modules.orders.dtos import PlacedOrderDTO
from modules.orders.events import OrderPlaced, OrderStatusChanged
from modules.orders.exceptions import (
    EventNotActive,
    EventNotFound,
    InsufficientStock,
    InvalidOrderStatus,
    OrderNotFound,
    ProductMissing,
    ProductNotFound,
)
from modules.products.tasks import queue_low_stock_alert

if TYPE_CHECKING:
    from modules.events.repositories.interfaces import IEventRepository
    from modules.orders.dtos import MarkDeliveredDTO, PlaceOrderDTO
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


@dataclass
class _StockPlan:
    product_id: Any
    name: str
    new_stock: int
    low_stock_limit: int


class OrderService:
    """Application service for Order use-cases.

    Receives repositories via constructor injection.
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        event_repository: IEventRepository,
        product_repository: IProductRepository,
    ) -> None:
        self._order_repo = order_repository
        self._event_repo = event_repository
        self._product_repo = product_repository

    # ------------------------------------------------------------------
    # Order placement
    # ------------------------------------------------------------------

    def place_order(self, dto: PlaceOrderDTO) -> PlacedOrderDTO:
        """Place a customer order, decrementing tracked stock atomically.

        Raises:
            EventNotFound: the event does not exist.
            EventNotActive: the event is closed or cancelled.
            ProductNotFound: no product has one of the requested names.
            ProductMissing: a product vanished before it could be locked.
            InsufficientStock: a tracked product has less stock than asked.
        """
        log = logger.bind(event_id=dto.event_id, channel=str(dto.channel))
        log.info("order.placement_started", total_items=dto.total_items)

        try:
            result = self._place_order(dto, log)
        except Exception as exc:
            log.warning("order.placement_rejected", reason=str(exc))
            raise

        log.info(
            "order.placed",
            order_id=str(result.order_id),
            updated_stocks=result.updated_stocks,
        )
        return result

    @transaction.atomic
    def _place_order(self, dto: PlaceOrderDTO, log: Any) -> PlacedOrderDTO:
        # 1. Event must exist and accept orders
        event = self._event_repo.get_for_update(dto.event_id)
        if not event:
            raise EventNotFound()
        if not event.is_active:
            raise EventNotActive()

        # 2. Resolve display names, in cart order
        resolved = {}
        for name in dto.quantities:
            product = self._product_repo.get_by_name(name)
            if not product:
                raise ProductNotFound(name)
            resolved[name] = product.id

        # 3. Lock by primary key, then check stock in cart order
        locked = {}
        for name, product_id in sorted(resolved.items(), key=lambda kv: str(kv[1])):
            locked[name] = self._product_repo.get_for_update(str(product_id))

        plans: List[_StockPlan] = []
        for name, qty in dto.quantities.items():
            product = locked[name]
            if not product:
                raise ProductMissing(name)
            if not product.is_stock_tracked:
                continue
            if product.stock_qty < qty:
                raise InsufficientStock(name, product.stock_qty)
            plans.append(
                _StockPlan(
                    product_id=product.id,
                    name=name,
                    new_stock=product.stock_qty - qty,
                    low_stock_limit=product.low_stock_limit,
                )
            )

        # 4. Apply decrements
        updated_stocks: Dict[str, int] = {}
        for plan in plans:
            product = locked[plan.name]
            product.stock_qty = plan.new_stock
            product.save(update_fields=["stock_qty"])
            updated_stocks[plan.name] = plan.new_stock
            log.info(
                "order.stock_decremented",
                product_id=str(plan.product_id),
                name=plan.name,
                remaining=plan.new_stock,
            )

        # 5. Persist the order with its OrderPlaced event
        is_delivery = dto.delivery_mode == DeliveryMode.DELIVERY
        order = self._order_repo.build(
            {
                "event": event,
                "customer_name": dto.customer_name,
                "note": dto.note,
                "quantities": dict(dto.quantities),
                "total_items": dto.total_items,
                "status": OrderStatus.PENDING,
                "channel": str(dto.channel),
                "delivery_mode": str(dto.delivery_mode),
                "delivery_date": dto.delivery_date or NO_PREFERENCE,
                "delivery_time_slot": dto.delivery_time_slot or NO_PREFERENCE,
                "location_link": dto.location_link if is_delivery else "",
            }
        )
        order.add_domain_event(
            OrderPlaced(
                aggregate_id=order.id,
                sales_event_id=str(event.id),
                channel=str(dto.channel),
                total_items=dto.total_items,
                quantities=dict(dto.quantities),
            )
        )
        self._order_repo.save(order)

        # 6. Low-stock alerts, after commit only
        for plan in plans:
            if plan.new_stock <= plan.low_stock_limit:
                product_id = str(plan.product_id)
                transaction.on_commit(
                    lambda product_id=product_id: queue_low_stock_alert(product_id)
                )

        return PlacedOrderDTO(order_id=order.id, updated_stocks=updated_stocks)

    # ------------------------------------------------------------------
    # Seller / driver commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def update_status(self, order_id: str, new_status: str) -> Order:
        """Move an order to ``new_status`` (seller dashboard).

        Leaving ``delivered`` clears the driver annotation; moving to
        ``delivered`` here stamps ``delivered_at`` without a driver name.

        Raises:
            OrderNotFound: order does not exist.
            InvalidOrderStatus: transition is not allowed.
        """
        order = self._lock_order(order_id)
        return self._transition(order, new_status)

    @transaction.atomic
    def mark_delivered(self, order_id: str, dto: MarkDeliveredDTO) -> Order:
        """Driver confirms delivery and signs it with their name.

        Raises:
            OrderNotFound: order does not exist.
            InvalidOrderStatus: the order is cancelled or already delivered.
        """
        order = self._lock_order(order_id)
        return self._transition(order, OrderStatus.DELIVERED, driver_name=dto.driver_name)

    @transaction.atomic
    def unmark_delivered(self, order_id: str) -> Order:
        """Undo a delivery confirmation: back to ``confirmed``.

        Raises:
            OrderNotFound: order does not exist.
            InvalidOrderStatus: the order is not delivered.
        """
        order = self._lock_order(order_id)
        if not order.is_delivered:
            raise InvalidOrderStatus(
                f"Only delivered orders can be unmarked (status is {order.status})."
            )
        return self._transition(order, OrderStatus.CONFIRMED)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: str) -> Order:
        """Retrieve a single order by ID.

        Raises:
            OrderNotFound: if the order does not exist.
        """
        order = self._order_repo.get_by_id(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def list_event_orders(
        self, event_id: str, filters: Optional[Dict[str, Any]] = None
    ) -> models.QuerySet:
        return self._order_repo.list_for_event(event_id, filters)

    def list_deliveries(self, filters: Optional[Dict[str, Any]] = None) -> models.QuerySet:
        return self._order_repo.list_deliveries(filters)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _lock_order(self, order_id: str) -> Order:
        order = self._order_repo.get_for_update(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def _transition(
        self, order: Order, new_status: str, driver_name: Optional[str] = None
    ) -> Order:
        log = logger.bind(
            order_id=str(order.id),
            current_status=order.status,
            new_status=str(new_status),
        )
        if not order.can_transition_to(new_status):
            log.warning("order.invalid_transition")
            raise InvalidOrderStatus(
                f"Cannot transition from {order.status} to {new_status}."
            )

        old_status = order.status
        order.status = new_status
        if new_status == OrderStatus.DELIVERED:
            order.delivered_at = timezone.now()
            order.delivery_driver_name = driver_name or ""
        else:
            order.clear_delivery()

        order.add_domain_event(
            OrderStatusChanged(
                aggregate_id=order.id,
                old_status=str(old_status),
                new_status=str(new_status),
                driver_name=driver_name,
            )
        )
        self._order_repo.save(
            order,
            update_fields=["status", "delivery_driver_name", "delivered_at"],
        )
        log.info("order.status_updated", driver_name=driver_name)
        return order
