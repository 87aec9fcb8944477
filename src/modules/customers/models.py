"""Customer model.

A customer is the storefront identity behind checkout.  Authentication is
delegated to Django's auth ``User`` (one-to-one); checkout only consumes
the ``{id, name, email}`` triple.

Business rules implemented:
- E-mail is unique and stored lowercase.
- Customer rows are never deleted while orders reference them
  (``Order.customer`` uses ``PROTECT``).
"""

from __future__ import annotations

from django.conf import settings
from django.db import models

from modules.core.models import BaseModel


class Customer(BaseModel):
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="customer",
    )
    name = models.CharField(max_length=255)
    email = models.EmailField(max_length=254, unique=True)

    class Meta:
        db_table = "customers"
        ordering = ["-created_at"]

    def save(self, *args, **kwargs) -> None:
        if self.email:
            self.email = self.email.strip().lower()
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.name} (#{self.pk})"
