"""Stripe client for the payment gateway port.

Payment intents are created with the ``stripe`` SDK. The SDK owns network
retries, timeouts and authentication; ``configure_stripe`` applies the
project settings for those once, at application start-up, and routes the
SDK's HTTP traffic through ``httpx``.
"""

from typing import Optional

import stripe
from django.conf import settings

from .domain import PaymentGatewayPort


def configure_stripe() -> None:
    """Apply API key, retry count and HTTP client settings to the SDK."""
    stripe.api_key = settings.STRIPE_SECRET_KEY
    stripe.max_network_retries = getattr(settings, "STRIPE_MAX_NETWORK_RETRIES", 2)
    stripe.default_http_client = stripe.HTTPXClient(
        timeout=getattr(settings, "STRIPE_TIMEOUT_SECS", 10.0),
        allow_sync_methods=True,
    )


class StripePaymentGateway(PaymentGatewayPort):
    """Payment gateway backed by Stripe PaymentIntents."""

    def __init__(self, api_key: str | None = None):
        self.api_key = api_key or settings.STRIPE_SECRET_KEY

    def create_payment_intent(self, params: dict, idempotency_key: Optional[str] = None) -> stripe.PaymentIntent:
        """Create a PaymentIntent.

        Args:
            params: PaymentIntent creation parameters.
            idempotency_key: Optional Stripe idempotency key.

        Returns:
            stripe.PaymentIntent: The intent exactly as Stripe returned it.

        Raises:
            stripe.StripeError: Any SDK error, unchanged.
        """
        options = {"api_key": self.api_key}
        if idempotency_key:
            options["idempotency_key"] = idempotency_key
        return stripe.PaymentIntent.create(**params, **options)
