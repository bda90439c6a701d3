"""User domain constants."""

from django.db import models


class UserRole(models.TextChoices):
    CUSTOMER = "customer", "Customer"
    TECHNICIAN = "technician", "Technician"


DEFAULT_ROLE = UserRole.CUSTOMER
