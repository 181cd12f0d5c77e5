from django_ipn_fixer.classifier import Classification, TransactionClassifier
from django_ipn_fixer.conf import settings as app_settings
from django_ipn_fixer.constants import (
    CORRECTION_FLAG_KEY,
    INVOICE_MARKER,
    INVOICE_SEPARATOR,
    PAYMENT_TRANSACTION_TYPE,
    Outcome,
)
from django_ipn_fixer.diagnostics import DiagnosticsSink, Severity
from django_ipn_fixer.exceptions import SubscriptionSaveError
from django_ipn_fixer.notification import Notification
from django_ipn_fixer.repositories import OrderLookup, SubscriptionStore
from django_ipn_fixer.resolver import Resolution, SubscriptionResolver

NOT_SET = "NOT_SET"

MESSAGES = {
    Outcome.WRONG_TRANSACTION_TYPE: "Skipping - not a subscription payment transaction",
    Outcome.MARKER_ABSENT: "Skipping - invoice does not contain the renewal-after-failure marker",
    Outcome.MALFORMED_ORDER_ID: "Skipping - could not extract numeric order ID from invoice",
    Outcome.ORDER_NOT_FOUND: "Skipping - order not found",
    Outcome.NOT_RENEWAL_ORDER: "Skipping - order is not a renewal order or is a parent order",
    Outcome.PAYLOAD_EMPTY: "Skipping - custom field is empty",
    Outcome.PAYLOAD_UNPARSEABLE: "Skipping - could not parse custom field",
    Outcome.SUBSCRIPTION_ID_MISSING: "Skipping - subscription_id missing from custom field",
    Outcome.SUBSCRIPTION_NOT_FOUND: "Skipping - subscription not found",
    Outcome.CORRECTED: "Set correction flag to prevent renewal sign-up after failure",
}

SEVERITIES = {
    Outcome.WRONG_TRANSACTION_TYPE: Severity.DEBUG,
    Outcome.MARKER_ABSENT: Severity.DEBUG,
    Outcome.MALFORMED_ORDER_ID: Severity.WARNING,
    Outcome.ORDER_NOT_FOUND: Severity.WARNING,
    Outcome.NOT_RENEWAL_ORDER: Severity.DEBUG,
    Outcome.PAYLOAD_EMPTY: Severity.WARNING,
    Outcome.PAYLOAD_UNPARSEABLE: Severity.WARNING,
    Outcome.SUBSCRIPTION_ID_MISSING: Severity.WARNING,
    Outcome.SUBSCRIPTION_NOT_FOUND: Severity.WARNING,
    Outcome.CORRECTED: Severity.INFO,
}


class MetaReconciler:
    """
    Rewrites a subscription's correction flag ahead of renewal processing.

    When a subscription payment IPN references a failed renewal order through
    the invoice marker, the renewal component compares the order id against
    the subscription's correction flag. Writing the order id there first, as
    an integer, makes that comparison match so the payment is processed as a
    normal renewal instead of being applied to the failed order again.

    Build one at startup and register ``handle`` ahead of the downstream stage.
    """

    def __init__(
        self,
        orders: OrderLookup,
        subscriptions: SubscriptionStore,
        sink: DiagnosticsSink | None = None,
        *,
        transaction_type: str = PAYMENT_TRANSACTION_TYPE,
        marker: str = INVOICE_MARKER,
        separator: str = INVOICE_SEPARATOR,
        flag_key: str = CORRECTION_FLAG_KEY,
    ):
        self.subscriptions = subscriptions
        self.sink = sink or DiagnosticsSink()
        self.flag_key = flag_key
        self.classifier = TransactionClassifier(
            orders,
            transaction_type=transaction_type,
            marker=marker,
            separator=separator,
        )
        self.resolver = SubscriptionResolver(subscriptions)

    @classmethod
    def from_settings(cls) -> "MetaReconciler":
        return cls(
            app_settings.ORDER_REPOSITORY(),
            app_settings.SUBSCRIPTION_REPOSITORY(),
            DiagnosticsSink(app_settings.LOGGER_NAME),
            transaction_type=app_settings.PAYMENT_TRANSACTION_TYPE,
            marker=app_settings.INVOICE_MARKER,
            separator=app_settings.INVOICE_SEPARATOR,
            flag_key=app_settings.CORRECTION_FLAG_KEY,
        )

    def __call__(self, notification: Notification) -> None:
        self.handle(notification)

    def handle(self, notification: Notification) -> None:
        """
        Run the correction for one notification.

        Stops quietly at the first guard that fails. Raises
        SubscriptionSaveError if the store reports a failed save; store
        errors propagate unchanged.
        """
        classification = self.classifier.classify(notification)
        if not classification.qualifies:
            self._report_classification(notification, classification)
            return

        resolution = self.resolver.resolve(notification.correlation_payload)
        if not resolution.resolved:
            self._report_resolution(notification, classification, resolution)
            return

        subscription = resolution.subscription
        order_id = classification.order_id
        previous = self.subscriptions.get_attribute(subscription, self.flag_key)

        # Always written, even when it already matches
        self.subscriptions.set_attribute(subscription, self.flag_key, order_id)
        if not self.subscriptions.save(subscription):
            raise SubscriptionSaveError(resolution.subscription_id)

        self._record(
            Outcome.CORRECTED,
            subscription_id=resolution.subscription_id,
            old_order_id=order_id,
            previous_recorded=previous,
            new_recorded=order_id,
            txn_id=notification.transaction_id or NOT_SET,
            invoice=notification.invoice,
        )

    def _record(self, outcome: Outcome, **fields) -> None:
        self.sink.record(
            SEVERITIES[outcome], MESSAGES[outcome], outcome=outcome.value, **fields
        )

    def _report_classification(
        self, notification: Notification, classification: Classification
    ) -> None:
        outcome = classification.outcome
        if outcome is Outcome.WRONG_TRANSACTION_TYPE:
            self._record(outcome, txn_type=notification.transaction_type or NOT_SET)
        elif outcome is Outcome.MARKER_ABSENT:
            self._record(outcome, invoice=notification.invoice)
        elif outcome is Outcome.MALFORMED_ORDER_ID:
            self._record(
                outcome,
                invoice=notification.invoice,
                extracted_order_id=classification.marker.candidate_id,
            )
        elif outcome is Outcome.ORDER_NOT_FOUND:
            self._record(
                outcome, order_id=classification.order_id, invoice=notification.invoice
            )
        else:
            self._record(
                outcome,
                order_id=classification.order_id,
                is_renewal_order=classification.is_renewal,
                is_parent_order=classification.is_parent,
            )

    def _report_resolution(
        self,
        notification: Notification,
        classification: Classification,
        resolution: Resolution,
    ) -> None:
        fields = {"invoice": notification.invoice, "order_id": classification.order_id}
        if resolution.outcome in (
            Outcome.PAYLOAD_UNPARSEABLE,
            Outcome.SUBSCRIPTION_ID_MISSING,
        ):
            fields["custom"] = notification.correlation_payload
        elif resolution.outcome is Outcome.SUBSCRIPTION_NOT_FOUND:
            fields["subscription_id"] = resolution.subscription_id

        self._record(resolution.outcome, **fields)
