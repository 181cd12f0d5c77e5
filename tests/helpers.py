import json

from django_ipn_fixer.models import SubscriptionMeta
from django_ipn_fixer.notification import Notification

FLAG_KEY = "_paypal_failed_sign_up_recorded"


def make_ipn(**overrides) -> dict:
    """Build IPN variables for a subscription payment after a failed renewal."""
    ipn = {
        "txn_type": "subscr_payment",
        "invoice": "WC-ORDER-42-wcsfrp-17",
        "custom": json.dumps({"order_id": 42, "subscription_id": 9}),
        "txn_id": "8AB12345CD678901E",
    }
    ipn.update(overrides)
    return ipn


def make_notification(**overrides) -> Notification:
    return Notification.from_ipn(make_ipn(**overrides))


def store_flag(subscription, value: str):
    """Write the correction flag row directly, as legacy code stored it."""
    return SubscriptionMeta.objects.create(
        subscription=subscription, key=FLAG_KEY, value=value
    )
