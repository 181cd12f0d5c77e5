from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Notification:
    """
    A validated PayPal Standard IPN, reduced to the fields the correction reads.

    Lives only for the duration of one dispatch; never persisted.
    """

    transaction_type: str = ""
    invoice: str = ""
    correlation_payload: str = ""
    transaction_id: str = ""

    @classmethod
    def from_ipn(cls, transaction_details: dict[str, Any]) -> "Notification":
        """
        Build a Notification from raw IPN variables.

        Args:
            transaction_details: IPN POST variables (txn_type, invoice, custom, txn_id)

        Returns:
            Notification with missing fields set to ""
        """
        return cls(
            transaction_type=str(transaction_details.get("txn_type") or ""),
            invoice=str(transaction_details.get("invoice") or ""),
            correlation_payload=str(transaction_details.get("custom") or ""),
            transaction_id=str(transaction_details.get("txn_id") or ""),
        )
