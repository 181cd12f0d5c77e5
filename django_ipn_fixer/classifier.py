from dataclasses import dataclass
from typing import Any

from django_ipn_fixer.constants import (
    INVOICE_MARKER,
    INVOICE_SEPARATOR,
    PAYMENT_TRANSACTION_TYPE,
    Outcome,
)
from django_ipn_fixer.notification import Notification
from django_ipn_fixer.parsing import InvoiceMarker, parse_invoice_marker
from django_ipn_fixer.repositories import OrderLookup


@dataclass(frozen=True)
class Classification:
    outcome: Outcome
    marker: InvoiceMarker = InvoiceMarker(present=False)
    order: Any = None
    order_id: int | None = None
    is_renewal: bool = False
    is_parent: bool = False

    @property
    def qualifies(self) -> bool:
        return self.outcome is Outcome.QUALIFIES


class TransactionClassifier:
    """
    Decides whether a notification refers to a failed renewal order that
    needs its subscription's correction flag rewritten.

    Rules run in order and stop at the first that fails; each failure has its
    own Outcome.
    """

    def __init__(
        self,
        orders: OrderLookup,
        *,
        transaction_type: str = PAYMENT_TRANSACTION_TYPE,
        marker: str = INVOICE_MARKER,
        separator: str = INVOICE_SEPARATOR,
    ):
        self.orders = orders
        self.transaction_type = transaction_type
        self.marker = marker
        self.separator = separator

    def classify(self, notification: Notification) -> Classification:
        if notification.transaction_type != self.transaction_type:
            return Classification(Outcome.WRONG_TRANSACTION_TYPE)

        marker = parse_invoice_marker(
            notification.invoice, marker=self.marker, separator=self.separator
        )
        if not marker.present:
            return Classification(Outcome.MARKER_ABSENT, marker=marker)

        order_id = marker.order_id
        if order_id is None:
            return Classification(Outcome.MALFORMED_ORDER_ID, marker=marker)

        order = self.orders.get(order_id)
        if order is None:
            return Classification(
                Outcome.ORDER_NOT_FOUND, marker=marker, order_id=order_id
            )

        is_renewal = bool(self.orders.is_renewal(order))
        is_parent = bool(self.orders.is_parent(order))
        outcome = (
            Outcome.QUALIFIES
            if is_renewal and not is_parent
            else Outcome.NOT_RENEWAL_ORDER
        )

        return Classification(
            outcome,
            marker=marker,
            order=order,
            order_id=order_id,
            is_renewal=is_renewal,
            is_parent=is_parent,
        )
