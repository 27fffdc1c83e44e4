"""Tests for event simplification."""

import pytest

from conftest import load_event
from stripe_relay.models.event import VerifiedEvent
from stripe_relay.models.payload import EventKind, GenericPayload, InvoicePayload
from stripe_relay.services.simplifier import classify, simplify, to_iso8601


def _event(event_type: str, obj: dict | None = None) -> VerifiedEvent:
    return VerifiedEvent(id="evt_test", type=event_type, object=obj or {})


@pytest.mark.parametrize(
    "event_type, kind",
    [
        ("invoice.paid", EventKind.INVOICE),
        ("invoice.payment_failed", EventKind.INVOICE),
        ("invoiceitem.created", EventKind.GENERIC),
        ("Invoice.paid", EventKind.GENERIC),
        ("customer.subscription.updated", EventKind.GENERIC),
        ("", EventKind.GENERIC),
    ],
)
def test_classify(event_type, kind):
    assert classify(event_type) is kind


def test_invoice_event_fully_populated():
    event = VerifiedEvent.from_payload(load_event("invoice.paid"))
    payload = simplify(event)
    assert isinstance(payload, InvoicePayload)
    assert payload.model_dump(by_alias=True) == {
        "invoiceId": "in_1OFpaid0000000000000001",
        "status": "paid",
        "hostedInvoiceUrl": "https://invoice.stripe.com/i/acct_1Nabc/test_YWNjdA",
        "amountDue": 10.5,
        "currency": "eur",
        "createdAt": "2023-11-14T22:13:20.000Z",
        "paidAt": "2023-11-14T22:13:23.000Z",
        "customer": "cus_P4xQ2bC1d9Kz",
        "number": "A1B2C3D4-0007",
        "metadata": {"businessId": "biz_042", "month": "2023-11"},
    }


def test_invoice_event_sparse_uses_defaults():
    event = VerifiedEvent.from_payload(load_event("invoice.finalized.sparse"))
    payload = simplify(event)
    assert payload.invoice_id == "in_1OFfinal000000000000001"
    assert payload.status == "open"
    assert payload.amount_due is None
    assert payload.currency == "usd"
    assert payload.created_at == ""
    assert payload.paid_at == ""
    assert payload.hosted_invoice_url == ""
    assert payload.customer == ""
    assert payload.number == ""
    assert payload.metadata == {}


def test_empty_invoice_object():
    payload = simplify(_event("invoice.paid"))
    assert payload == InvoicePayload()


def test_amount_due_minor_to_major_units():
    assert simplify(_event("invoice.paid", {"amount_due": 1050})).amount_due == 10.5
    assert simplify(_event("invoice.paid", {"amount_due": 1999})).amount_due == pytest.approx(19.99)


def test_amount_due_zero_is_not_null():
    assert simplify(_event("invoice.paid", {"amount_due": 0})).amount_due == 0.0


@pytest.mark.parametrize("value", [None, "ten", True, [], {"value": 1}])
def test_amount_due_malformed_is_null(value):
    assert simplify(_event("invoice.paid", {"amount_due": value})).amount_due is None


def test_amount_due_numeric_string():
    assert simplify(_event("invoice.paid", {"amount_due": "1050"})).amount_due == 10.5


def test_created_at_iso8601():
    payload = simplify(_event("invoice.paid", {"created": 1700000000}))
    assert payload.created_at == "2023-11-14T22:13:20.000Z"


@pytest.mark.parametrize("value", [None, 0, "1700000000", 1.5, True, 10**20])
def test_created_at_unusable_is_empty(value):
    assert simplify(_event("invoice.paid", {"created": value})).created_at == ""


def test_paid_at_from_status_transitions():
    payload = simplify(_event("invoice.paid", {"status_transitions": {"paid_at": 1700000000}}))
    assert payload.paid_at == "2023-11-14T22:13:20.000Z"


def test_status_transitions_not_a_mapping():
    assert simplify(_event("invoice.paid", {"status_transitions": "paid"})).paid_at == ""


def test_to_iso8601():
    assert to_iso8601(0) == ""
    assert to_iso8601(None) == ""
    assert to_iso8601(86400) == "1970-01-02T00:00:00.000Z"


def test_wrong_typed_text_fields_default():
    payload = simplify(_event("invoice.paid", {"id": 12, "status": None, "number": ["x"], "currency": ""}))
    assert payload.invoice_id == ""
    assert payload.status == ""
    assert payload.number == ""
    assert payload.currency == "usd"


def test_expanded_customer_reference():
    payload = simplify(_event("invoice.paid", {"customer": {"id": "cus_expanded", "object": "customer"}}))
    assert payload.customer == "cus_expanded"


def test_metadata_values_coerced_to_text():
    payload = simplify(_event("invoice.paid", {"metadata": {"seats": 3, "plan": "pro"}}))
    assert payload.metadata == {"seats": "3", "plan": "pro"}


def test_metadata_not_a_mapping():
    assert simplify(_event("invoice.paid", {"metadata": "x"})).metadata == {}


def test_generic_event():
    event = VerifiedEvent.from_payload(load_event("customer.subscription.updated"))
    payload = simplify(event)
    assert isinstance(payload, GenericPayload)
    assert payload.model_dump(by_alias=True) == {
        "rawType": "customer.subscription.updated",
        "objectId": "sub_1OFsub000000000000001",
        "objectType": "subscription",
    }


def test_generic_event_empty_object():
    payload = simplify(_event("charge.refunded"))
    assert payload == GenericPayload(raw_type="charge.refunded")


def test_simplify_is_deterministic():
    event = VerifiedEvent.from_payload(load_event("invoice.paid"))
    assert simplify(event) == simplify(event)
    assert simplify(event).model_dump() == simplify(event).model_dump()


def test_metadata_null_and_nested_values():
    payload = simplify(
        _event("invoice.paid", {"metadata": {"note": None, "tags": ["a", "b"], "extra": {"a": 1}, "flag": True}})
    )
    assert payload.metadata == {"note": "", "tags": '["a","b"]', "extra": '{"a":1}', "flag": "true"}
