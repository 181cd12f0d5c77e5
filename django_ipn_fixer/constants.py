from enum import Enum

INVOICE_MARKER = "-wcsfrp-"
INVOICE_SEPARATOR = "-"

PAYMENT_TRANSACTION_TYPE = "subscr_payment"

CORRECTION_FLAG_KEY = "_paypal_failed_sign_up_recorded"

SUBSCRIPTION_ID_FIELD = "subscription_id"

# Upper bound of a BigAutoField primary key
MAX_OBJECT_ID = 2**63 - 1

# Pipeline ordering: lower runs first
CORRECTION_PRIORITY = -10
DOWNSTREAM_PRIORITY = 0

LOG_SOURCE = "django-ipn-fixer"


class Outcome(str, Enum):
    """Result of one step of the correction."""

    QUALIFIES = "qualifies"
    WRONG_TRANSACTION_TYPE = "wrong_transaction_type"
    MARKER_ABSENT = "marker_absent"
    MALFORMED_ORDER_ID = "malformed_order_id"
    ORDER_NOT_FOUND = "order_not_found"
    NOT_RENEWAL_ORDER = "not_renewal_order"

    RESOLVED = "resolved"
    PAYLOAD_EMPTY = "payload_empty"
    PAYLOAD_UNPARSEABLE = "payload_unparseable"
    SUBSCRIPTION_ID_MISSING = "subscription_id_missing"
    SUBSCRIPTION_NOT_FOUND = "subscription_not_found"

    CORRECTED = "corrected"
