"""
Contracts for the order/subscription persistence layer, plus the default
implementations backed by this app's models.

Point ``DJANGO_IPN_FIXER_ORDER_REPOSITORY`` and
``DJANGO_IPN_FIXER_SUBSCRIPTION_REPOSITORY`` at other classes to correct
subscriptions kept somewhere else.
"""
import logging
from typing import Any, Protocol

from django_ipn_fixer.models import Order, Subscription

logger = logging.getLogger(__name__)


class OrderLookup(Protocol):
    def get(self, order_id: int) -> Any | None: ...

    def is_renewal(self, order: Any) -> bool: ...

    def is_parent(self, order: Any) -> bool: ...


class SubscriptionStore(Protocol):
    def get(self, subscription_id: int) -> Any | None: ...

    def get_attribute(self, subscription: Any, key: str) -> Any: ...

    def set_attribute(self, subscription: Any, key: str, value: Any) -> None: ...

    def save(self, subscription: Any) -> bool: ...


class OrderRepository:
    def get(self, order_id: int) -> Order | None:
        return Order.objects.filter(pk=order_id).first()

    def is_renewal(self, order: Order) -> bool:
        return order.is_renewal

    def is_parent(self, order: Order) -> bool:
        return order.is_parent


class SubscriptionRepository:
    def get(self, subscription_id: int) -> Subscription | None:
        return Subscription.objects.filter(pk=subscription_id).first()

    def get_attribute(self, subscription: Subscription, key: str) -> Any:
        return subscription.get_meta(key)

    def set_attribute(self, subscription: Subscription, key: str, value: Any) -> None:
        subscription.update_meta_data(key, value)

    def save(self, subscription: Subscription) -> bool:
        """
        Persist the subscription and its buffered meta atomically.

        Database errors propagate to the caller.
        """
        subscription.save()
        logger.debug("[django-ipn-fixer] Saved subscription id=%s", subscription.pk)
        return True
