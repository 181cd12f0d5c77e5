import logging
from typing import Any, Callable

from django.apps import apps

from django_ipn_fixer import signals
from django_ipn_fixer.constants import DOWNSTREAM_PRIORITY
from django_ipn_fixer.notification import Notification

logger = logging.getLogger(__name__)

Handler = Callable[[Notification], Any]


class NotificationPipeline:
    """
    Ordered stages run for each validated IPN.

    Stages run in ascending priority, in registration order on ties. An
    exception raised by a stage ends the dispatch of that notification and
    propagates to the caller.
    """

    def __init__(self):
        self._stages: list[tuple[int, int, Handler]] = []
        self._counter = 0

    def register(self, handler: Handler, priority: int = DOWNSTREAM_PRIORITY) -> None:
        if handler in self.handlers:
            return
        self._stages.append((priority, self._counter, handler))
        self._counter += 1
        self._stages.sort(key=lambda stage: stage[:2])

    def unregister(self, handler: Handler) -> None:
        self._stages = [stage for stage in self._stages if stage[2] != handler]

    @property
    def handlers(self) -> list[Handler]:
        return [handler for _, _, handler in self._stages]

    def dispatch(self, notification: Notification) -> None:
        for priority, _, handler in list(self._stages):
            logger.debug(
                "[django-ipn-fixer] Running stage %r (priority %s) for txn %s",
                handler,
                priority,
                notification.transaction_id or "NOT_SET",
            )
            handler(notification)


def send_ipn_validated(notification: Notification) -> None:
    """Downstream stage: hand the notification to ``ipn_validated`` receivers."""
    signals.ipn_validated.send(sender=Notification, notification=notification)


def get_pipeline() -> NotificationPipeline:
    return apps.get_app_config("django_ipn_fixer").pipeline


def dispatch_ipn(transaction_details: dict[str, Any]) -> Notification:
    """
    Entry point for host code once an IPN has been verified with PayPal.

    Args:
        transaction_details: IPN POST variables

    Returns:
        The Notification that was dispatched
    """
    notification = Notification.from_ipn(transaction_details)
    get_pipeline().dispatch(notification)
    return notification
