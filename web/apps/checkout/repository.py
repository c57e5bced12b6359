"""Repository layer for persisting customers and their orders.

This module implements ``CustomerStorePort`` on top of the Django ORM. The
customer is the aggregate root: ``save`` explicitly writes every unsaved
order reachable from it, with its addresses and items, instead of relying
on an ORM cascade. The domain layer never sees ORM types.
"""

from contextlib import contextmanager
from typing import Iterable, Optional

from django.db import DatabaseError, IntegrityError, transaction

from .domain import Address, Customer, CustomerStorePort, Order, OrderItem
from .errors import ConflictError, StoreError
from .models import AddressModel, CustomerModel, OrderItemModel, OrderModel


class CustomerRepository(CustomerStorePort):
    """Customer store backed by the Django ORM.

    Email uniqueness is enforced by the database. An existing customer row
    is locked (``SELECT ... FOR UPDATE``) when it is looked up, so
    concurrent checkouts for the same customer are serialized.
    """

    @contextmanager
    def atomic(self):
        """Run the block in a database transaction.

        Database errors escaping the block are re-raised as ``StoreError``
        after the rollback; ``ConflictError`` passes through unchanged.
        """
        try:
            with transaction.atomic():
                yield
        except DatabaseError as e:
            raise StoreError("STORE_UNAVAILABLE") from e

    def find_by_email(self, email: str) -> Optional[Customer]:
        """Lock and return the customer profile for ``email``; orders are not loaded."""
        row = CustomerModel.objects.select_for_update().filter(email=email).first()
        if row is None:
            return None
        return _to_customer(row)

    def save(self, customer: Customer) -> None:
        """Persist a customer aggregate.

        New customers are inserted; stored customers are never updated.
        Orders without an id are inserted together with their addresses and
        items. Must be called inside ``atomic()``.

        Args:
            customer: Aggregate root to save.

        Raises:
            ConflictError: When a new customer's email is already taken.
        """
        if customer.id is None:
            try:
                # Savepoint: only the insert is rolled back on conflict
                with transaction.atomic():
                    row = CustomerModel.objects.create(
                        first_name=customer.first_name,
                        last_name=customer.last_name,
                        email=customer.email,
                    )
            except IntegrityError as e:
                raise ConflictError("CUSTOMER_EMAIL_TAKEN") from e
            customer.id = row.pk

        for order in customer.orders:
            if order.id is None:
                order.id = _insert_order(customer.id, order)


# ---------------- Writes ---------------- #

def _insert_address(address: Address) -> AddressModel:
    return AddressModel.objects.create(
        street=address.street,
        city=address.city,
        state=address.state,
        country=address.country,
        zip_code=address.zip_code,
    )


def _insert_items(order_row: OrderModel, items: Iterable[OrderItem]) -> None:
    OrderItemModel.objects.bulk_create(
        [
            OrderItemModel(
                order=order_row,
                product_id=it.product_id,
                image_url=it.image_url,
                unit_price=it.unit_price,
                quantity=it.quantity,
            )
            for it in items
        ]
    )


def _insert_order(customer_id: int, order: Order) -> int:
    row = OrderModel.objects.create(
        tracking_number=order.tracking_number,
        total_quantity=order.total_quantity,
        total_price=order.total_price,
        customer_id=customer_id,
        billing_address=_insert_address(order.billing_address),
        shipping_address=_insert_address(order.shipping_address),
    )
    _insert_items(row, order.items)
    return row.pk


# ---------------- Reads ---------------- #

def _to_customer(row: CustomerModel) -> Customer:
    # Profile only: stored orders are never rewritten by save()
    return Customer(
        id=row.pk,
        first_name=row.first_name,
        last_name=row.last_name,
        email=row.email,
    )
