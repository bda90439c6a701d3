from __future__ import annotations

import random
from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.utils import timezone

from modules.messaging.models import Message
from modules.orders.constants import OrderStatus
from modules.orders.models import Order
from modules.users.constants import UserRole
from modules.users.models import UserProfile

SEED_PROFILES = [
    ("alice", "Alice Customer", "alice@example.com", UserRole.CUSTOMER),
    ("bruna", "Bruna Customer", "bruna@example.com", UserRole.CUSTOMER),
    ("tom", "Tom Technician", "tom@example.com", UserRole.TECHNICIAN),
    ("tina", "Tina Technician", "tina@example.com", UserRole.TECHNICIAN),
]

DESIGNS = [
    "Pink nails with glitter",
    "French tips, almond shape",
    "Matte black with gold foil",
    "Pastel ombre, coffin shape",
    "Holographic chrome, short square",
]


class Command(BaseCommand):
    help = "Seed database with realistic development data."

    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding development data...")

        profiles = self._seed_profiles()
        customers = [p for p in profiles if p.role == UserRole.CUSTOMER]
        technicians = [p for p in profiles if p.role == UserRole.TECHNICIAN]
        orders_created = self._seed_orders(customers, technicians)

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"profiles={len(profiles)}, "
                f"orders={orders_created}"
            )
        )

    def _seed_profiles(self) -> list[UserProfile]:
        """Local users (for SimpleJWT tokens) plus their profiles."""
        self.stdout.write("Creating users and profiles...")
        User = get_user_model()
        profiles: list[UserProfile] = []
        for username, name, email, role in SEED_PROFILES:
            if not User.objects.filter(username=username).exists():
                User.objects.create_user(username, password=f"{username}123")
            profile, _ = UserProfile.objects.get_or_create(
                auth_subject=username,
                defaults={"name": name, "email": email, "role": role},
            )
            profiles.append(profile)
        self.stdout.write(self.style.SUCCESS("Creating users and profiles... Done!"))
        return profiles

    def _seed_orders(
        self, customers: list[UserProfile], technicians: list[UserProfile]
    ) -> int:
        self.stdout.write("Creating orders...")
        if not customers or not technicians:
            self.stdout.write(self.style.WARNING("Skipping orders (no profiles)."))
            return 0

        orders_created = 0
        for i, status in enumerate(OrderStatus.values * 3):
            description = f"{DESIGNS[i % len(DESIGNS)]} (seed {i + 1})"
            if Order.objects.filter(description=description).exists():
                continue
            customer = random.choice(customers)

            fields: dict = {"status": status}
            if status != OrderStatus.SUBMITTED:
                fields["technician"] = random.choice(technicians)
            if status == OrderStatus.REJECTED:
                fields["feedback"] = "Design is not feasible, please simplify."
            elif status != OrderStatus.SUBMITTED:
                fields["price"] = Decimal(random.randint(25, 90)).quantize(
                    Decimal("0.01")
                )

            order = Order.objects.create(
                customer=customer,
                description=description,
                quantity=random.randint(1, 5),
                **fields,
            )
            created_at = timezone.now() - timedelta(days=random.randint(0, 30))
            Order.objects.filter(id=order.id).update(created_at=created_at)

            if order.technician_id:
                Message.objects.create(
                    order=order, sender=customer, text="Any update on this one?"
                )
                Message.objects.create(
                    order=order, sender=order.technician, text="Working on it!"
                )
            orders_created += 1

        self.stdout.write(self.style.SUCCESS("Creating orders... Done!"))
        return orders_created
