from dataclasses import dataclass
from typing import Any

from django_ipn_fixer.coercion import absint
from django_ipn_fixer.constants import SUBSCRIPTION_ID_FIELD, Outcome
from django_ipn_fixer.parsing import parse_correlation_payload
from django_ipn_fixer.repositories import SubscriptionStore

# Values a PHP-serialized custom field uses for "no subscription"
EMPTY_VALUES = (None, "", "0", 0, False)


def _is_empty(value: Any) -> bool:
    if isinstance(value, (list, dict, tuple)):
        return not value
    return value in EMPTY_VALUES


@dataclass(frozen=True)
class Resolution:
    outcome: Outcome
    subscription: Any = None
    subscription_id: int | None = None
    payload: dict | None = None

    @property
    def resolved(self) -> bool:
        return self.outcome is Outcome.RESOLVED


class SubscriptionResolver:
    """Finds the subscription named in a notification's ``custom`` payload."""

    def __init__(
        self,
        subscriptions: SubscriptionStore,
        *,
        field: str = SUBSCRIPTION_ID_FIELD,
    ):
        self.subscriptions = subscriptions
        self.field = field

    def resolve(self, correlation_payload: str) -> Resolution:
        if not correlation_payload:
            return Resolution(Outcome.PAYLOAD_EMPTY)

        payload = parse_correlation_payload(correlation_payload)
        if payload is None:
            return Resolution(Outcome.PAYLOAD_UNPARSEABLE)

        raw_id = payload.get(self.field)
        if _is_empty(raw_id):
            return Resolution(Outcome.SUBSCRIPTION_ID_MISSING, payload=payload)

        subscription_id = absint(raw_id)
        if not subscription_id:
            return Resolution(Outcome.SUBSCRIPTION_ID_MISSING, payload=payload)

        subscription = self.subscriptions.get(subscription_id)
        if subscription is None:
            return Resolution(
                Outcome.SUBSCRIPTION_NOT_FOUND,
                subscription_id=subscription_id,
                payload=payload,
            )

        return Resolution(
            Outcome.RESOLVED,
            subscription=subscription,
            subscription_id=subscription_id,
            payload=payload,
        )
