"""Asynchronous tasks of the products module."""

import structlog
from celery import shared_task
from kombu.exceptions import OperationalError

from modules.products.models import Product

logger = structlog.get_logger(__name__)


@shared_task(name="products.notify_low_stock")
def notify_low_stock(product_id: str) -> dict:
    """Warn the seller that a tracked product is running out.

    Queued after an order commits; re-reads the product so the alert
    reflects the latest stock, not the value at queue time.
    """
    product = Product.objects.alive().filter(id=product_id).first()
    if product is None or not product.is_stock_tracked:
        return {"alerted": False}

    if product.stock_qty > product.low_stock_limit:
        return {"alerted": False}

    logger.warning(
        "product.low_stock",
        product_id=str(product.id),
        name=product.name,
        stock_qty=product.stock_qty,
        threshold=product.low_stock_limit,
        out_of_stock=product.is_out_of_stock,
    )
    return {"alerted": True, "stock_qty": product.stock_qty}


def queue_low_stock_alert(product_id: str) -> None:
    """Queue ``notify_low_stock``; a broker outage must not fail the caller.

    Runs from ``transaction.on_commit``, after the order is already stored.
    """
    try:
        notify_low_stock.delay(product_id)
    except OperationalError:
        logger.exception("product.low_stock_alert_not_queued", product_id=product_id)
