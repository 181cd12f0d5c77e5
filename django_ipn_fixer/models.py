from django.db import models, transaction
from django.utils.translation import gettext_lazy as _

from django_ipn_fixer.coercion import meta_read_filters


class Order(models.Model):
    class Status(models.TextChoices):
        PENDING = "pending", _("Pending Payment")
        PROCESSING = "processing", _("Processing")
        COMPLETED = "completed", _("Completed")
        FAILED = "failed", _("Failed")
        CANCELLED = "cancelled", _("Cancelled")

    id = models.BigAutoField(primary_key=True)

    status = models.CharField(
        max_length=16,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "ipn_fixer_order"
        verbose_name = _("Order")
        verbose_name_plural = _("Orders")
        ordering = ["-created_at"]

    def __str__(self):
        return f"Order #{self.pk}"

    @property
    def is_parent(self) -> bool:
        """True if some subscription was initiated by this order."""
        return self.parent_of_subscriptions.exists()

    @property
    def is_renewal(self) -> bool:
        """True if this order pays a renewal cycle of some subscription."""
        return self.renewal_subscriptions.exists()


class Subscription(models.Model):
    """
    A recurring-payment subscription.

    Meta values are written through ``update_meta_data`` and persisted on
    ``save``; every read through ``get_meta`` passes the registered meta read
    filters.
    """

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        ACTIVE = "active", _("Active")
        ON_HOLD = "on-hold", _("On Hold")
        CANCELLED = "cancelled", _("Cancelled")
        EXPIRED = "expired", _("Expired")

    id = models.BigAutoField(primary_key=True)

    status = models.CharField(
        max_length=16,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True,
    )

    parent_order = models.ForeignKey(
        Order,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="parent_of_subscriptions",
        help_text=_("Order that initiated the subscription"),
    )
    renewal_orders = models.ManyToManyField(
        Order,
        blank=True,
        related_name="renewal_subscriptions",
        help_text=_("Orders created for recurring billing cycles"),
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "ipn_fixer_subscription"
        verbose_name = _("Subscription")
        verbose_name_plural = _("Subscriptions")
        ordering = ["-created_at"]

    def __str__(self):
        return f"Subscription #{self.pk}"

    @property
    def _pending_meta(self) -> dict:
        return self.__dict__.setdefault("_pending_meta_data", {})

    def get_meta(self, key: str, default=""):
        """Read a meta value, preferring unsaved changes over stored rows."""
        if key in self._pending_meta:
            value = self._pending_meta[key]
        elif self.pk is None:
            value = default
        else:
            value = (
                self.meta.filter(key=key).values_list("value", flat=True).first()
            )
            if value is None:
                value = default
        return meta_read_filters.apply(key, value)

    def update_meta_data(self, key: str, value) -> None:
        self._pending_meta[key] = value

    def save(self, *args, **kwargs):
        with transaction.atomic():
            super().save(*args, **kwargs)
            for key, value in self._pending_meta.items():
                SubscriptionMeta.objects.update_or_create(
                    subscription=self,
                    key=key,
                    defaults={"value": "" if value is None else str(value)},
                )
        self._pending_meta.clear()


class SubscriptionMeta(models.Model):
    """Key/value attribute row; values are stored as text."""

    subscription = models.ForeignKey(
        Subscription, on_delete=models.CASCADE, related_name="meta"
    )
    key = models.CharField(max_length=255, db_index=True)
    value = models.TextField(blank=True, default="")

    class Meta:
        db_table = "ipn_fixer_subscription_meta"
        verbose_name = _("Subscription Meta")
        verbose_name_plural = _("Subscription Meta")
        constraints = [
            models.UniqueConstraint(
                fields=["subscription", "key"], name="ipn_fixer_meta_unique_key"
            ),
        ]

    def __str__(self):
        return f"{self.key}={self.value}"
