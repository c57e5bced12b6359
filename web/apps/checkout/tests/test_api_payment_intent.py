"""API tests for the payment intent endpoint.

The in-process gateway stub backs the happy path; gateway failures are
injected through a patched provider to check the HTTP mapping and that no
local state is written.
"""

import pytest
import stripe

from apps.checkout.adapters import InMemoryCustomerStore
from apps.checkout.domain import CheckoutService
from apps.checkout.models import CustomerModel, OrderModel

INTENT_URL = "/api/checkout/payment-intent/"


class RaisingGateway:
    def __init__(self, error):
        self.error = error

    def create_payment_intent(self, params, idempotency_key=None):
        raise self.error


class RecordingGateway:
    def __init__(self):
        self.calls = []

    def create_payment_intent(self, params, idempotency_key=None):
        self.calls.append((params, idempotency_key))
        return {"id": "pi_123", "client_secret": "pi_123_secret_abc", "amount": params["amount"]}


def use_gateway(monkeypatch, gateway):
    monkeypatch.setattr(
        "apps.checkout.providers.get_checkout_service",
        lambda: CheckoutService(InMemoryCustomerStore(), gateway),
    )


@pytest.mark.django_db
def test_payment_intent_returns_gateway_handle(client):
    payload = {"amount": 1999, "currency": "USD", "receiptEmail": "a@b.com"}
    r = client.post(INTENT_URL, data=payload, content_type="application/json")
    assert r.status_code == 200
    body = r.json()
    assert body["object"] == "payment_intent"
    assert body["client_secret"].startswith(body["id"])
    assert body["amount"] == 1999
    assert body["currency"] == "usd"
    assert body["payment_method_types"] == ["card"]
    assert body["description"] == "Shop purchase"
    assert body["receipt_email"] == "a@b.com"
    assert CustomerModel.objects.count() == 0
    assert OrderModel.objects.count() == 0


@pytest.mark.django_db
def test_payment_intent_body_is_gateway_response_verbatim(client, monkeypatch):
    gateway = RecordingGateway()
    use_gateway(monkeypatch, gateway)

    r = client.post(
        INTENT_URL,
        data={"amount": 500, "currency": "eur", "receipt_email": "a@b.com"},
        content_type="application/json",
        HTTP_IDEMPOTENCY_KEY="intent-key-1",
    )
    assert r.status_code == 200
    assert r.json() == {"id": "pi_123", "client_secret": "pi_123_secret_abc", "amount": 500}
    assert gateway.calls == [
        (
            {
                "amount": 500,
                "currency": "eur",
                "payment_method_types": ["card"],
                "description": "Shop purchase",
                "receipt_email": "a@b.com",
            },
            "intent-key-1",
        )
    ]


@pytest.mark.parametrize(
    "payload",
    [
        {"amount": 0, "currency": "usd", "receiptEmail": "a@b.com"},
        {"amount": 19.99, "currency": "usd", "receiptEmail": "a@b.com"},
        {"amount": 1999, "currency": "us", "receiptEmail": "a@b.com"},
        {"amount": 1999, "currency": "usd", "receiptEmail": "nope"},
        {"amount": 1999, "currency": "usd"},
    ],
)
@pytest.mark.django_db
def test_payment_intent_validation_error(client, payload):
    r = client.post(INTENT_URL, data=payload, content_type="application/json")
    assert r.status_code == 400


@pytest.mark.parametrize(
    "error, expected_status",
    [
        (stripe.CardError("Your card was declined.", param=None, code="card_declined"), 402),
        (stripe.InvalidRequestError("Invalid currency: xyz", param="currency", code="parameter_invalid"), 400),
        (stripe.APIConnectionError("Network error"), 502),
        (stripe.AuthenticationError("Invalid API Key provided"), 502),
    ],
)
@pytest.mark.django_db
def test_payment_intent_gateway_errors(client, monkeypatch, error, expected_status):
    use_gateway(monkeypatch, RaisingGateway(error))

    r = client.post(
        INTENT_URL,
        data={"amount": 1999, "currency": "usd", "receiptEmail": "a@b.com"},
        content_type="application/json",
    )
    assert r.status_code == expected_status
    body = r.json()
    assert body["detail"] == "GATEWAY_ERROR"
    assert body["code"] == error.code


class StripeObjectGateway:
    def create_payment_intent(self, params, idempotency_key=None):
        return stripe.PaymentIntent.construct_from(
            {
                "id": "pi_1",
                "object": "payment_intent",
                "client_secret": "pi_1_secret_x",
                "amount": params["amount"],
                "currency": params["currency"],
                "metadata": {"source": "shop"},
            },
            "sk_test_123",
        )


@pytest.mark.django_db
def test_payment_intent_serializes_sdk_objects(client, monkeypatch):
    use_gateway(monkeypatch, StripeObjectGateway())

    r = client.post(
        INTENT_URL,
        data={"amount": 1999, "currency": "usd", "receiptEmail": "a@b.com"},
        content_type="application/json",
    )
    assert r.status_code == 200
    assert r.json() == {
        "id": "pi_1",
        "object": "payment_intent",
        "client_secret": "pi_1_secret_x",
        "amount": 1999,
        "currency": "usd",
        "metadata": {"source": "shop"},
    }
