"""
Parsers for the two gateway-supplied strings the correction reads: the
invoice (which may embed a reference to a previously failed order) and the
``custom`` passthrough variable (which carries the subscription id).
"""
import json
import re
from typing import Any, NamedTuple

from django_ipn_fixer.coercion import absint
from django_ipn_fixer.constants import INVOICE_MARKER, INVOICE_SEPARATOR

DIGITS_RE = re.compile(r"[0-9]+")


class InvoiceMarker(NamedTuple):
    present: bool
    candidate_id: str = ""

    @property
    def is_numeric(self) -> bool:
        return DIGITS_RE.fullmatch(self.candidate_id) is not None

    @property
    def order_id(self) -> int | None:
        if not self.present or not self.is_numeric:
            return None
        return absint(self.candidate_id)


def parse_invoice_marker(
    invoice: str,
    marker: str = INVOICE_MARKER,
    separator: str = INVOICE_SEPARATOR,
) -> InvoiceMarker:
    """
    Detect the renewal-after-failure marker and pull out the referenced order.

    The marker is a plain substring test. The candidate id is whatever follows
    the last separator in the whole invoice, e.g. ``WC-ORDER-42-wcsfrp-17``
    gives ``"17"``.

    Args:
        invoice: Gateway invoice string, possibly empty
        marker: Literal token bounded by separators
        separator: Character preceding the order id

    Returns:
        InvoiceMarker(present, candidate_id); candidate_id is "" when absent
    """
    invoice = invoice or ""
    if marker not in invoice:
        return InvoiceMarker(present=False)

    _, _, candidate_id = invoice.rpartition(separator)
    return InvoiceMarker(present=True, candidate_id=candidate_id)


def parse_correlation_payload(payload: str) -> dict[str, Any] | None:
    """
    Decode the ``custom`` variable as a JSON object.

    Returns:
        dict on success, None if the payload is not a JSON object
    """
    try:
        data = json.loads(payload)
    except (TypeError, ValueError, RecursionError):
        return None

    if not isinstance(data, dict):
        return None
    return data
