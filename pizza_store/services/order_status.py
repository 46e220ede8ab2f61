from datetime import datetime, timedelta, timezone
from typing import Optional

from pizza_store.core.config import settings
from pizza_store.core.timezone_utils import ensure_utc, to_store_time
from pizza_store.schemas.order import Order, OrderWithStatus

PLACED = "Placed"
PREPARING = "Preparing"
OUT_FOR_DELIVERY = "Out for delivery"
DELIVERED = "Delivered"

MILESTONES = (PLACED, PREPARING, OUT_FOR_DELIVERY, DELIVERED)


def derive_status(order: Order, now: Optional[datetime] = None) -> OrderWithStatus:
    """Compute the display status of an order from its creation time.

    Pure apart from reading the clock when ``now`` is omitted. Elapsed time
    since created_time is bucketed into placed, preparing, out for delivery
    and delivered; the estimated delivery time is created_time plus the
    preparation and delivery durations.
    """
    now = ensure_utc(now) if now is not None else datetime.now(timezone.utc)
    created = ensure_utc(order.created_time)

    placed = timedelta(seconds=settings.ORDER_PLACED_SECONDS)
    preparation = timedelta(seconds=settings.ORDER_PREPARATION_SECONDS)
    delivery = timedelta(seconds=settings.ORDER_DELIVERY_SECONDS)
    delivered_at = created + preparation + delivery

    elapsed = now - created
    if elapsed < placed:
        status_text = PLACED
    elif elapsed < preparation:
        status_text = PREPARING
    elif now < delivered_at:
        status_text = OUT_FOR_DELIVERY
    else:
        status_text = DELIVERED

    return OrderWithStatus(
        order=order.model_copy(update={"created_time": to_store_time(created)}),
        status_text=status_text,
        is_delivered=status_text == DELIVERED,
        estimated_delivery_time=to_store_time(delivered_at),
        total_price=order.total_price(),
    )
