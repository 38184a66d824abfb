"""Order domain constants.

Status/channel/delivery-mode choices, the seller status state machine and
the input limits applied to customer orders at intake.
"""

from django.db import models


class OrderStatus(models.TextChoices):
    PENDING = "pending", "Pendente"
    CONFIRMED = "confirmed", "Confirmado"
    DELIVERED = "delivered", "Entregue"
    CANCELLED = "cancelled", "Cancelado"


class OrderChannel(models.TextChoices):
    WHATSAPP = "whatsapp", "WhatsApp"
    MESSENGER = "messenger", "Messenger"


class DeliveryMode(models.TextChoices):
    DELIVERY = "delivery", "Entrega"
    PICKUP = "pickup", "Retirada"
    NONE = "none", "Sem entrega"


VALID_TRANSITIONS: dict[str, set[str]] = {
    OrderStatus.PENDING: {
        OrderStatus.CONFIRMED,
        OrderStatus.DELIVERED,
        OrderStatus.CANCELLED,
    },
    OrderStatus.CONFIRMED: {
        OrderStatus.PENDING,
        OrderStatus.DELIVERED,
        OrderStatus.CANCELLED,
    },
    OrderStatus.DELIVERED: {OrderStatus.PENDING, OrderStatus.CONFIRMED},
    OrderStatus.CANCELLED: set(),
}

TERMINAL_STATES: set[str] = {OrderStatus.CANCELLED}

# ---------------------------------------------------------------------------
# Intake limits (characters unless noted)
# ---------------------------------------------------------------------------
EVENT_ID_MAX_LENGTH = 120
PRODUCT_NAME_MAX_LENGTH = 120
CUSTOMER_NAME_MAX_LENGTH = 80
NOTE_MAX_LENGTH = 800
DELIVERY_DATE_MAX_LENGTH = 40
DELIVERY_TIME_SLOT_MAX_LENGTH = 20
LOCATION_LINK_MAX_LENGTH = 300
DRIVER_NAME_MAX_LENGTH = 80

MAX_QTY_PER_ITEM = 999

NO_PREFERENCE = "Sem preferência"
