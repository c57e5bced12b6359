"""Service provider helpers for wiring CheckoutService with ports.

``get_checkout_service`` returns a ``CheckoutService`` backed by the Django
customer repository. The payment gateway is the Stripe client when
``settings.USE_STRIPE_GATEWAY`` is truthy, and the in-process stub
otherwise (tests and local development without Stripe credentials).
"""

from django.conf import settings

from .adapters import PaymentGatewayStub
from .domain import CheckoutService
from .repository import CustomerRepository
from .stripe_adapters import StripePaymentGateway


def get_checkout_service() -> CheckoutService:
    """Return a configured CheckoutService instance."""
    if getattr(settings, "USE_STRIPE_GATEWAY", False):
        gateway = StripePaymentGateway()
    else:
        gateway = PaymentGatewayStub()

    return CheckoutService(
        store=CustomerRepository(),
        gateway=gateway,
        max_conflict_retries=getattr(settings, "CHECKOUT_CONFLICT_RETRIES", 3),
    )
