"""Domain models, ports and service for checkout.

This module contains the dataclasses that make up a checkout (customers,
orders, items, addresses and the transient purchase / payment values), the
protocol definitions (ports) for the customer store and the payment
gateway, and the domain service that places orders and creates payment
intents.
"""

import logging
import uuid
from contextlib import AbstractContextManager
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Any, List, Optional, Protocol

from .errors import ConflictError

logger = logging.getLogger("checkout")

PAYMENT_METHOD_TYPES = ("card",)
PAYMENT_DESCRIPTION = "Shop purchase"


def normalize_email(email: str) -> str:
    """Return the identity key used to match customers.

    Emails are compared case-insensitively, so ``Ada@Example.com `` and
    ``ada@example.com`` resolve to the same customer.
    """
    return email.strip().lower()


def generate_order_tracking_number() -> str:
    """Return a random UUID4 in canonical string form."""
    return str(uuid.uuid4())


# ---- Entities / value objects ----
@dataclass(frozen=True)
class Address:
    """A postal address attached to an order as billing or shipping."""

    street: str
    city: str
    country: str
    zip_code: str
    state: str = ""


@dataclass(frozen=True)
class OrderItem:
    """A single priced line item.

    Attributes:
        product_id: Catalogue reference of the product.
        quantity: Number of units ordered.
        unit_price: Price of one unit, as submitted by the storefront.
        image_url: Optional product thumbnail shown in order history.
    """

    product_id: str
    quantity: int
    unit_price: Decimal
    image_url: str = ""


@dataclass
class Order:
    """One checkout transaction.

    Attributes:
        total_quantity: Total units, as submitted with the purchase.
        total_price: Total price, as submitted with the purchase.
        tracking_number: Public identifier, assigned once by
            ``assign_tracking_number``.
        billing_address: Billing ``Address``.
        shipping_address: Shipping ``Address``.
        items: ``OrderItem`` instances owned by this order.
        customer: Owning ``Customer``, set by ``Customer.add``.
        id: Store identifier, or None if not yet saved.
    """

    total_quantity: int = 0
    total_price: Decimal = Decimal("0")
    tracking_number: Optional[str] = None
    billing_address: Optional[Address] = None
    shipping_address: Optional[Address] = None
    items: List[OrderItem] = field(default_factory=list)
    customer: Optional["Customer"] = field(default=None, repr=False, compare=False)
    id: Optional[int] = None

    def assign_tracking_number(self, tracking_number: str) -> None:
        """Set the tracking number.

        Raises:
            ValueError: ``TRACKING_NUMBER_ALREADY_ASSIGNED`` if the order
                already carries one.
        """
        if self.tracking_number is not None:
            raise ValueError("TRACKING_NUMBER_ALREADY_ASSIGNED")
        self.tracking_number = tracking_number

    def add(self, item: OrderItem) -> None:
        self.items.append(item)


@dataclass
class Customer:
    """A customer identified by email, owning its orders."""

    first_name: str
    last_name: str
    email: str
    id: Optional[int] = None
    orders: List[Order] = field(default_factory=list, repr=False)

    def add(self, order: Order) -> None:
        order.customer = self
        self.orders.append(order)


@dataclass
class Purchase:
    """A checkout submission as received from the storefront."""

    customer: Customer
    shipping_address: Address
    billing_address: Address
    order: Order
    order_items: List[OrderItem]


@dataclass(frozen=True)
class PurchaseResponse:
    order_tracking_number: str


@dataclass(frozen=True)
class PaymentInfo:
    """Amount (minor units), currency and receipt email for one intent."""

    amount: int
    currency: str
    receipt_email: str


# ---- Ports (DIP) ----
class CustomerStorePort(Protocol):
    """Port describing the customer store used by the checkout service.

    ``find_by_email`` and ``save`` are expected to run inside the scope
    returned by ``atomic``, which commits on normal exit and rolls back
    everything written in it when an exception escapes.
    """

    def atomic(self) -> AbstractContextManager:
        """Return a transaction scope."""
        raise NotImplementedError()

    def find_by_email(self, email: str) -> Optional[Customer]:
        """Return the stored customer for ``email`` (exact match) or None.

        Only unsaved orders matter to ``save``, so stores may return the
        customer without its order history.
        """
        raise NotImplementedError()

    def save(self, customer: Customer) -> None:
        """Persist ``customer`` and every unsaved order reachable from it.

        Stored customers keep their profile fields; only new orders (with
        their addresses and items) are written. Store identifiers are set on
        the domain objects.

        Raises:
            ConflictError: If a new customer's email already exists.
            StoreError: For any other storage failure.
        """
        raise NotImplementedError()


class PaymentGatewayPort(Protocol):
    """Port describing the external payment gateway."""

    def create_payment_intent(self, params: dict, idempotency_key: Optional[str] = None) -> Any:
        """Create a payment intent and return the gateway's handle.

        Args:
            params: Gateway request parameters.
            idempotency_key: Optional key letting the gateway de-duplicate
                retried requests.

        Raises:
            Exception: Whatever the gateway client raises, unchanged.
        """
        raise NotImplementedError()


def build_payment_intent_params(payment_info: PaymentInfo) -> dict:
    """Translate ``payment_info`` into the gateway's request parameters."""
    return {
        "amount": payment_info.amount,
        "currency": payment_info.currency,
        "payment_method_types": list(PAYMENT_METHOD_TYPES),
        "description": PAYMENT_DESCRIPTION,
        "receipt_email": payment_info.receipt_email,
    }


# ---- Domain service ----
class CheckoutService:
    """Domain service for checkout.

    Places orders against the customer store and creates payment intents
    through the payment gateway. The two operations are independent: an
    intent is usually created first, confirmed by the payer, and only then
    followed by ``place_order``.
    """

    def __init__(self, store: CustomerStorePort, gateway: PaymentGatewayPort, max_conflict_retries: int = 3):
        """Initialize the service with required dependencies.

        Args:
            store: CustomerStorePort holding customers and their orders.
            gateway: PaymentGatewayPort used to create payment intents.
            max_conflict_retries: How many times a customer email conflict
                is retried before it is surfaced to the caller.
        """
        self.store = store
        self.gateway = gateway
        self.max_conflict_retries = max_conflict_retries

    def reconcile_customer(self, submitted: Customer) -> Customer:
        """Return the customer a new order should be saved against.

        An existing customer with the same (normalized) email wins and the
        submitted profile fields are discarded. Otherwise a new, unsaved
        customer is built from the submitted descriptor.

        Must be called inside ``store.atomic()``.
        """
        email = normalize_email(submitted.email)
        existing = self.store.find_by_email(email)
        if existing is not None:
            return existing
        return replace(submitted, email=email, id=None, orders=[])

    def place_order(self, purchase: Purchase) -> PurchaseResponse:
        """Assemble the order, attach it to its customer and save both.

        Args:
            purchase: The checkout submission.

        Returns:
            PurchaseResponse carrying the new order's tracking number.

        Raises:
            ValueError: 'EMPTY_ORDER' if the purchase has no items.
            ConflictError: If the customer email kept conflicting after
                ``max_conflict_retries`` retries.
            StoreError: If the store failed; nothing was saved.
        """
        if not purchase.order_items:
            raise ValueError("EMPTY_ORDER")

        # 1) Assemble
        order = purchase.order
        tracking_number = generate_order_tracking_number()
        order.assign_tracking_number(tracking_number)
        for item in purchase.order_items:
            order.add(item)
        order.billing_address = purchase.billing_address
        order.shipping_address = purchase.shipping_address

        # 2) Reconcile and save in one transaction
        attempt = 0
        while True:
            try:
                with self.store.atomic():
                    customer = self.reconcile_customer(purchase.customer)
                    customer.add(order)
                    self.store.save(customer)
                break
            except ConflictError:
                order.customer = None
                order.id = None
                attempt += 1
                if attempt > self.max_conflict_retries:
                    logger.warning("customer conflict not resolved", extra={"attempts": attempt})
                    raise
                logger.info("customer conflict, retrying lookup", extra={"attempt": attempt})

        logger.info(
            "order placed",
            extra={
                "tracking_number": tracking_number,
                "customer_id": customer.id,
                "items": len(order.items),
            },
        )
        return PurchaseResponse(order_tracking_number=tracking_number)

    def create_payment_intent(self, payment_info: PaymentInfo, idempotency_key: Optional[str] = None) -> Any:
        """Create a card payment intent and return the gateway's handle as is.

        Gateway errors propagate unchanged; nothing is retried or stored.
        """
        params = build_payment_intent_params(payment_info)
        logger.info(
            "payment intent requested",
            extra={"amount": payment_info.amount, "currency": payment_info.currency},
        )
        return self.gateway.create_payment_intent(params, idempotency_key=idempotency_key)
