from decimal import Decimal

import pytest

from apps.checkout.domain import Address, Customer, Order, OrderItem, Purchase


def make_purchase(email="ada@example.com", first_name="Ada", items=None):
    """Build a domain purchase with two line items unless ``items`` is given."""
    if items is None:
        items = [
            OrderItem("1001", 2, Decimal("9.99")),
            OrderItem("1002", 1, Decimal("20.00"), image_url="/img/1002.png"),
        ]
    return Purchase(
        customer=Customer(first_name=first_name, last_name="Lovelace", email=email),
        shipping_address=Address("1 Ship St", "London", "UK", "N1 1AA"),
        billing_address=Address("2 Bill Rd", "London", "UK", "N1 2BB"),
        order=Order(total_quantity=3, total_price=Decimal("39.98")),
        order_items=items,
    )


@pytest.fixture
def purchase_factory():
    return make_purchase


@pytest.fixture
def purchase_payload():
    """Return a builder for JSON purchase bodies as the storefront sends them."""

    def build(email="ada@example.com", first_name="Ada", items=None):
        if items is None:
            items = [
                {"productId": 1001, "quantity": 2, "unitPrice": "9.99", "imageUrl": "/img/1001.png"},
                {"productId": 1002, "quantity": 1, "unitPrice": "20.00"},
            ]
        return {
            "customer": {"firstName": first_name, "lastName": "Lovelace", "email": email},
            "shippingAddress": {"street": "1 Ship St", "city": "London", "state": "", "country": "UK", "zipCode": "N1 1AA"},
            "billingAddress": {"street": "2 Bill Rd", "city": "London", "country": "UK", "zipCode": "N1 2BB"},
            "order": {"totalQuantity": 3, "totalPrice": "39.98"},
            "orderItems": items,
        }

    return build
