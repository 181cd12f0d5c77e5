import pytest

from django_ipn_fixer.parsing import (
    InvoiceMarker,
    parse_correlation_payload,
    parse_invoice_marker,
)


class TestParseInvoiceMarker:
    def test_marker_absent(self):
        result = parse_invoice_marker("WC-ORDER-42")

        assert result == InvoiceMarker(present=False, candidate_id="")
        assert result.order_id is None

    def test_empty_invoice(self):
        assert parse_invoice_marker("").present is False

    def test_none_invoice(self):
        assert parse_invoice_marker(None).present is False

    def test_extracts_digits_after_last_dash(self):
        result = parse_invoice_marker("WC-ORDER-42-wcsfrp-17")

        assert result.present is True
        assert result.candidate_id == "17"
        assert result.order_id == 17

    @pytest.mark.parametrize(
        "prefix",
        ["", "WC", "WC-ORDER-42", "my-shop-prefix-with-dashes", "123-456"],
    )
    def test_candidate_independent_of_prefix(self, prefix):
        result = parse_invoice_marker(f"{prefix}-wcsfrp-2048")

        assert result.order_id == 2048

    def test_id_taken_from_tail_not_after_marker(self):
        result = parse_invoice_marker("WC-wcsfrp-17-99")

        assert result.present is True
        assert result.candidate_id == "99"

    def test_marker_requires_bounding_dashes(self):
        assert parse_invoice_marker("WC-ORDER-wcsfrp17").present is False

    @pytest.mark.parametrize("tail", ["abc", "17a", "", "1.5", "+17", " 17", "١٧"])
    def test_non_digit_tail_is_malformed(self, tail):
        result = parse_invoice_marker(f"WC-ORDER-42-wcsfrp-{tail}")

        assert result.present is True
        assert result.is_numeric is False
        assert result.order_id is None

    def test_leading_zeros(self):
        assert parse_invoice_marker("WC-wcsfrp-0017").order_id == 17

    def test_huge_id_is_clamped(self):
        result = parse_invoice_marker("WC-wcsfrp-" + "9" * 30)

        assert result.order_id == 2**63 - 1

    def test_custom_marker_and_separator(self):
        result = parse_invoice_marker(
            "WC_ORDER_42_retry_17", marker="_retry_", separator="_"
        )

        assert result.order_id == 17


class TestParseCorrelationPayload:
    def test_json_object(self):
        assert parse_correlation_payload('{"subscription_id": 9}') == {
            "subscription_id": 9
        }

    @pytest.mark.parametrize(
        "payload", ["not json", "{", "[1, 2]", "9", '"text"', "null"]
    )
    def test_non_object_returns_none(self, payload):
        assert parse_correlation_payload(payload) is None

    def test_none_payload(self):
        assert parse_correlation_payload(None) is None

    def test_too_deeply_nested_returns_none(self):
        payload = "[" * 100_000 + "]" * 100_000

        assert parse_correlation_payload(payload) is None
