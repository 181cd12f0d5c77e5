import json
import logging

import pytest

from django_ipn_fixer.meta import get_raw_meta
from django_ipn_fixer.models import Subscription, SubscriptionMeta
from django_ipn_fixer.pipeline import dispatch_ipn
from tests.apps.testapp.signals import renewal_decisions
from tests.helpers import FLAG_KEY, make_ipn, store_flag

pytestmark = pytest.mark.django_db


class TestRenewalAfterFailure:
    """
    End to end: a validated IPN goes through the app pipeline, and the
    stand-in renewal component in the test app makes its strict equality check.
    """

    def test_worked_example(self, renewal_order):
        dispatch_ipn(
            {
                "txn_type": "subscr_payment",
                "invoice": "WC-ORDER-42-wcsfrp-17",
                "custom": json.dumps({"subscription_id": 9}),
                "txn_id": "8AB12345CD678901E",
            }
        )

        assert Subscription.objects.get(pk=9).get_meta(FLAG_KEY) == 17
        assert get_raw_meta(9, FLAG_KEY) == 17
        assert type(get_raw_meta(9, FLAG_KEY)) is int

    def test_downstream_sees_correction(self, renewal_order):
        dispatch_ipn(make_ipn())

        assert renewal_decisions == [
            {
                "subscription_id": 9,
                "order_id": 17,
                "recorded": 17,
                "is_renewal_sign_up_after_failure": False,
            }
        ]

    def test_stale_string_flag_still_matches(self, renewal_order, subscription):
        store_flag(subscription, "3")

        dispatch_ipn(make_ipn())

        assert renewal_decisions[-1]["is_renewal_sign_up_after_failure"] is False

    def test_redelivered_ipn(self, renewal_order):
        dispatch_ipn(make_ipn())
        dispatch_ipn(make_ipn())

        assert [d["recorded"] for d in renewal_decisions] == [17, 17]
        assert SubscriptionMeta.objects.filter(key=FLAG_KEY).count() == 1

    def test_parent_order_left_to_downstream(self, subscription):
        dispatch_ipn(make_ipn(invoice="WC-ORDER-42-wcsfrp-42"))

        assert renewal_decisions == [
            {
                "subscription_id": 9,
                "order_id": 42,
                "recorded": "",
                "is_renewal_sign_up_after_failure": True,
            }
        ]

    def test_unrelated_ipn_passes_through_quietly(self, renewal_order, caplog):
        caplog.set_level(logging.DEBUG, logger="django_ipn_fixer")

        notification = dispatch_ipn({"txn_type": "web_accept", "invoice": "WC-99"})

        assert notification.transaction_type == "web_accept"
        assert renewal_decisions == []
        assert not SubscriptionMeta.objects.exists()
        assert all(record.levelno < logging.WARNING for record in caplog.records)

    def test_correction_failure_stops_downstream(self, renewal_order, mocker):
        mocker.patch(
            "django_ipn_fixer.repositories.SubscriptionRepository.save",
            side_effect=RuntimeError("db down"),
        )

        with pytest.raises(RuntimeError):
            dispatch_ipn(make_ipn())

        assert renewal_decisions == []
