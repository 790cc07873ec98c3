"""Order domain constants."""

from django.db import models


class OrderStatus(models.TextChoices):
    ORDERED = "ORDERED", "Ordered"
    CANCELLED = "CANCELLED", "Cancelled"


class DeliveryStatus(models.TextChoices):
    READY = "READY", "Ready"
    COMP = "COMP", "Completed"


class HydrationStrategy(models.TextChoices):
    """How order read models are loaded.

    ``BATCHED`` is the only one meant for production traffic.  The others
    exist to compare query counts against it.
    """

    LAZY = "lazy", "Lazy walk"
    JOIN_FETCH = "join_fetch", "Join-fetch to-one associations"
    FLAT_JOIN = "flat_join", "Flat join (not paginable)"
    BATCHED = "batched", "Two-phase batched projection"


DEFAULT_HYDRATION_STRATEGY = HydrationStrategy.BATCHED

MAX_SUMMARY_LIMIT = 1000
