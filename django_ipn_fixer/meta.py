from typing import Any

from django_ipn_fixer.coercion import meta_read_filters
from django_ipn_fixer.models import SubscriptionMeta


def get_raw_meta(subscription_id: int, key: str, default: Any = "") -> Any:
    """
    Read a subscription meta value straight from the attribute table.

    This is the low-level path used by code that holds only an id, bypassing
    the Subscription object. It still passes the registered read filters, so
    the correction flag reads the same here as through ``Subscription.get_meta``.
    """
    value = (
        SubscriptionMeta.objects.filter(subscription_id=subscription_id, key=key)
        .values_list("value", flat=True)
        .first()
    )
    if value is None:
        value = default
    return meta_read_filters.apply(key, value)
