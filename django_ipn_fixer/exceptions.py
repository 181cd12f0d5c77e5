class IPNFixerError(Exception):
    """Common base class for django-ipn-fixer exceptions"""

    pass


class SubscriptionSaveError(IPNFixerError):
    """Raised when a subscription store reports that a save did not persist."""

    def __init__(self, subscription_id):
        self.subscription_id = subscription_id
        super().__init__(f"Failed to save subscription {subscription_id}")
