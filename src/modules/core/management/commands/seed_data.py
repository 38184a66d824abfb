from __future__ import annotations

import random

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from modules.events.dtos import CreateEventDTO
from modules.events.models import Event
from modules.events.repositories.django_repository import EventDjangoRepository
from modules.events.services import EventService
from modules.orders.constants import DeliveryMode, OrderChannel
from modules.orders.dtos import PlaceOrderDTO
from modules.orders.exceptions import OrderIntakeError
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.constants import ProductCategory
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository

CATALOG = [
    ("Coxinha", 250, ProductCategory.LANCHONETE, 40),
    ("Kibe", 250, ProductCategory.LANCHONETE, 30),
    ("Pastel de carne", 300, ProductCategory.LANCHONETE, 25),
    ("Pão de queijo (10un)", 600, ProductCategory.ASSADOS, None),
    ("Empada de frango", 350, ProductCategory.ASSADOS, 12),
    ("Brigadeiro", 150, ProductCategory.SOBREMESA, 60),
    ("Pudim", 1800, ProductCategory.SOBREMESA, 4),
    ("Feijoada (1kg)", 2500, ProductCategory.CONGELADOS, 8),
    ("Kit festa 100 salgados", 8000, ProductCategory.FESTA, 3),
    ("Marmita do dia", 1200, ProductCategory.COMIDA, None),
]

CUSTOMERS = ["Ana", "Bruno", "Carla", "Daniel", "Erika", "Fábio", "Gi", "Hiro"]


class Command(BaseCommand):
    help = "Seed database with a sample catalog, events and orders."

    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding development data...")

        users_created = self._seed_users()
        products = self._seed_products()
        events = self._seed_events(products)
        orders_created = self._seed_orders(events)

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"users={users_created}, "
                f"products={len(products)}, "
                f"events={len(events)}, "
                f"orders={orders_created}"
            )
        )

    def _seed_users(self) -> int:
        User = get_user_model()
        created = 0
        if not User.objects.filter(username="seller").exists():
            User.objects.create_superuser("seller", password="seller123")
            created += 1
        if not User.objects.filter(username="driver").exists():
            User.objects.create_user("driver", password="driver123")
            created += 1
        return created

    def _seed_products(self) -> list[Product]:
        self.stdout.write("Creating products...")
        products: list[Product] = []
        for name, price, category, stock in CATALOG:
            product = Product.objects.alive().filter(name=name).first()
            if product is None:
                product = Product.objects.create(
                    name=name,
                    price=price,
                    category=category,
                    stock_qty=stock,
                )
            products.append(product)
        self.stdout.write(self.style.SUCCESS("Creating products... Done!"))
        return products

    def _seed_events(self, products: list[Product]) -> list[Event]:
        self.stdout.write("Creating events...")
        service = EventService(
            event_repository=EventDjangoRepository(),
            product_repository=ProductDjangoRepository(),
        )
        names = [p.name for p in products]
        seeds = [
            ("Salgados de sábado", "Nagoya", ["10/05 (sáb)", "11/05 (dom)"], names[:6]),
            ("Festa junina", "Hamamatsu", ["22/06 (sáb)"], names[4:]),
        ]
        events: list[Event] = []
        for title, region, dates, product_names in seeds:
            event = Event.objects.filter(title=title, region=region).first()
            if event is None:
                event = service.create_event(
                    CreateEventDTO(
                        title=title,
                        region=region,
                        seller_name="Cozinha da Tia",
                        delivery_dates=dates,
                        product_names=product_names,
                        whatsapp="+81 90-1234-5678",
                    )
                )
            events.append(event)
        self.stdout.write(self.style.SUCCESS("Creating events... Done!"))
        return events

    def _seed_orders(self, events: list[Event]) -> int:
        """Orders go through the intake service so stock moves as in production."""
        self.stdout.write("Creating orders...")
        service = OrderService(
            order_repository=OrderDjangoRepository(),
            event_repository=EventDjangoRepository(),
            product_repository=ProductDjangoRepository(),
        )
        created = 0
        for event in events:
            if event.orders.exists():
                continue
            for customer in CUSTOMERS:
                picks = random.sample(event.product_names, k=min(2, len(event.product_names)))
                mode = random.choice(DeliveryMode.values)
                dto = PlaceOrderDTO(
                    event_id=str(event.id),
                    channel=random.choice(OrderChannel.values),
                    quantities={name: random.randint(1, 3) for name in picks},
                    customer_name=customer,
                    delivery_mode=mode,
                    delivery_date=random.choice(event.delivery_dates),
                    location_link=(
                        "https://maps.app.goo.gl/example"
                        if mode == DeliveryMode.DELIVERY
                        else ""
                    ),
                )
                try:
                    service.place_order(dto)
                except OrderIntakeError as exc:
                    self.stdout.write(self.style.WARNING(f"Skipped order: {exc}"))
                    continue
                created += 1
        self.stdout.write(self.style.SUCCESS("Creating orders... Done!"))
        return created
