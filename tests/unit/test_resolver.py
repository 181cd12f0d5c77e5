import json
from unittest.mock import Mock

import pytest

from django_ipn_fixer.constants import Outcome
from django_ipn_fixer.resolver import SubscriptionResolver


def make_store(subscription=None):
    store = Mock()
    store.get.return_value = subscription
    return store


class TestSubscriptionResolver:
    def test_resolves(self):
        subscription = object()
        store = make_store(subscription)

        result = SubscriptionResolver(store).resolve('{"subscription_id": 9}')

        assert result.resolved is True
        assert result.subscription is subscription
        assert result.subscription_id == 9
        store.get.assert_called_once_with(9)

    def test_string_id(self):
        store = make_store(object())

        result = SubscriptionResolver(store).resolve('{"subscription_id": "9"}')

        assert result.subscription_id == 9

    def test_empty_payload(self):
        store = make_store(object())

        result = SubscriptionResolver(store).resolve("")

        assert result.outcome is Outcome.PAYLOAD_EMPTY
        store.get.assert_not_called()

    @pytest.mark.parametrize(
        "payload", ["not json", "[9]", "9", "null", "[" * 100_000 + "]" * 100_000]
    )
    def test_unparseable_payload(self, payload):
        store = make_store(object())

        result = SubscriptionResolver(store).resolve(payload)

        assert result.outcome is Outcome.PAYLOAD_UNPARSEABLE
        store.get.assert_not_called()

    @pytest.mark.parametrize(
        "data",
        [
            {},
            {"order_id": 42},
            {"subscription_id": None},
            {"subscription_id": ""},
            {"subscription_id": "0"},
            {"subscription_id": 0},
            {"subscription_id": False},
            {"subscription_id": []},
            {"subscription_id": "abc"},
            {"subscription_id": -9},
        ],
    )
    def test_missing_subscription_id(self, data):
        store = make_store(object())

        result = SubscriptionResolver(store).resolve(json.dumps(data))

        assert result.outcome is Outcome.SUBSCRIPTION_ID_MISSING
        store.get.assert_not_called()

    def test_subscription_not_found(self):
        store = make_store(None)

        result = SubscriptionResolver(store).resolve('{"subscription_id": 404}')

        assert result.outcome is Outcome.SUBSCRIPTION_NOT_FOUND
        assert result.subscription_id == 404
