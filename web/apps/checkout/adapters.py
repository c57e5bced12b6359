"""In-process stub adapters for the checkout domain ports.

These stubs implement ``CustomerStorePort`` and ``PaymentGatewayPort``
without a database or network calls. They are intended for unit tests and
local development where deterministic behavior is useful and external
services are not required.
"""

import copy
import itertools
import threading
import uuid
from contextlib import contextmanager
from typing import Dict, Optional

import stripe

from .domain import Customer, CustomerStorePort, PaymentGatewayPort
from .errors import ConflictError


class InMemoryCustomerStore(CustomerStorePort):
    """Dict-backed customer store keyed by email.

    ``atomic`` holds a re-entrant lock for the whole transaction and
    restores a snapshot of the stored aggregates when the block raises, so
    concurrent checkouts are serialized and failed ones leave no trace.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._customers: Dict[str, Customer] = {}
        self._ids = itertools.count(1)

    @contextmanager
    def atomic(self):
        with self._lock:
            snapshot = copy.deepcopy(self._customers)
            try:
                yield
            except BaseException:
                self._customers = snapshot
                raise

    def find_by_email(self, email: str) -> Optional[Customer]:
        with self._lock:
            return self._customers.get(email)

    def save(self, customer: Customer) -> None:
        with self._lock:
            if customer.id is None:
                if customer.email in self._customers:
                    raise ConflictError("CUSTOMER_EMAIL_TAKEN")
                customer.id = next(self._ids)
                self._customers[customer.email] = customer
            for order in customer.orders:
                if order.id is None:
                    order.id = next(self._ids)

    def customers(self) -> list:
        """Return every stored customer."""
        with self._lock:
            return list(self._customers.values())


class PaymentGatewayStub(PaymentGatewayPort):
    """Stub implementation of ``PaymentGatewayPort``.

    Accepts positive amounts and returns a payment-intent-shaped dict that
    echoes the request parameters. Non-positive amounts are rejected the way
    Stripe rejects them, with ``stripe.InvalidRequestError``.
    """

    def create_payment_intent(self, params: dict, idempotency_key: Optional[str] = None) -> dict:
        """Create a mock payment intent.

        Args:
            params: Gateway request parameters.
            idempotency_key: Ignored by the stub.

        Returns:
            dict: ``id``, ``object``, ``client_secret``, ``status`` and the
            request parameters.

        Raises:
            stripe.InvalidRequestError: If ``params["amount"]`` <= 0.
        """
        if params["amount"] <= 0:
            raise stripe.InvalidRequestError("Amount must be a positive integer", param="amount")
        intent_id = f"pi_{uuid.uuid4().hex[:24]}"
        return {
            "id": intent_id,
            "object": "payment_intent",
            "client_secret": f"{intent_id}_secret_{uuid.uuid4().hex[:24]}",
            "status": "requires_payment_method",
            **params,
        }
