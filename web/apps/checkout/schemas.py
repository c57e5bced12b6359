"""Pydantic schemas for checkout.

This module exposes the request/validation schemas used by the checkout API
and their mapping onto domain values, plus the read schema for stored
orders. Request schemas accept snake_case keys and the camelCase keys sent
by the storefront (``firstName``, ``orderItems``, ``receiptEmail``...).
"""

import re
from datetime import datetime
from decimal import Decimal
from typing import List, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .domain import Address, Customer, Order, OrderItem, PaymentInfo, Purchase


EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
CURRENCY_RE = re.compile(r"^[a-z]{3}$")


def _validate_email(v: str) -> str:
    if not EMAIL_RE.match(v):
        raise ValueError("Invalid email address")
    return v


class _Payload(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class CustomerIn(_Payload):
    first_name: str = Field(min_length=1, max_length=255)
    last_name: str = Field(min_length=1, max_length=255)
    email: str = Field(max_length=255)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _validate_email(v)


class AddressIn(_Payload):
    street: str = Field(min_length=1, max_length=255)
    city: str = Field(min_length=1, max_length=255)
    state: str = Field(default="", max_length=255)
    country: str = Field(min_length=1, max_length=255)
    zip_code: str = Field(min_length=1, max_length=32)

    def to_domain(self) -> Address:
        return Address(
            street=self.street,
            city=self.city,
            state=self.state,
            country=self.country,
            zip_code=self.zip_code,
        )


class OrderIn(_Payload):
    """Order shell: the totals the storefront computed for the cart."""

    total_quantity: int = Field(ge=0)
    total_price: Decimal = Field(ge=0, max_digits=19, decimal_places=2)


class OrderItemIn(_Payload):
    """Input schema for a single priced line item.

    Attributes:
        product_id: Product reference; numeric ids are accepted and kept
            as strings.
        quantity: Positive number of units.
        unit_price: Non-negative unit price with at most two decimals.
        image_url: Optional product thumbnail URL.
    """

    product_id: Union[int, str]
    quantity: int = Field(gt=0)
    unit_price: Decimal = Field(ge=0, max_digits=19, decimal_places=2)
    image_url: str = Field(default="", max_length=255)

    @field_validator("product_id")
    @classmethod
    def validate_product_id(cls, v: Union[int, str]) -> str:
        v2 = str(v)
        if not v2 or len(v2) > 64:
            raise ValueError("Invalid product id")
        return v2


class PurchaseDTO(_Payload):
    """Schema for a checkout submission.

    ``order_items`` may be empty at this level; the domain service decides
    whether an empty order is acceptable.
    """

    customer: CustomerIn
    shipping_address: AddressIn
    billing_address: AddressIn
    order: OrderIn
    order_items: List[OrderItemIn]

    def to_domain(self) -> Purchase:
        return Purchase(
            customer=Customer(
                first_name=self.customer.first_name,
                last_name=self.customer.last_name,
                email=self.customer.email,
            ),
            shipping_address=self.shipping_address.to_domain(),
            billing_address=self.billing_address.to_domain(),
            order=Order(
                total_quantity=self.order.total_quantity,
                total_price=self.order.total_price,
            ),
            order_items=[
                OrderItem(
                    product_id=str(i.product_id),
                    quantity=i.quantity,
                    unit_price=i.unit_price,
                    image_url=i.image_url,
                )
                for i in self.order_items
            ],
        )


class PaymentInfoDTO(_Payload):
    """Schema for a payment intent request.

    Attributes:
        amount: Amount in minor currency units (cents), must be > 0.
        currency: 3-letter ISO currency code, normalized to lowercase.
            Whether the gateway supports it is for the gateway to say.
        receipt_email: Where the gateway sends the receipt.
    """

    amount: int = Field(gt=0)
    currency: str = Field(min_length=3, max_length=3)
    receipt_email: str = Field(max_length=255)

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v: str) -> str:
        v2 = v.lower()
        if not CURRENCY_RE.match(v2):
            raise ValueError("Invalid currency code")
        return v2

    @field_validator("receipt_email")
    @classmethod
    def validate_receipt_email(cls, v: str) -> str:
        return _validate_email(v)

    def to_domain(self) -> PaymentInfo:
        return PaymentInfo(amount=self.amount, currency=self.currency, receipt_email=self.receipt_email)


class OrderItemReadDTO(BaseModel):
    product_id: str
    quantity: int
    unit_price: Decimal
    image_url: str = ""


class OrderReadDTO(BaseModel):
    tracking_number: str
    total_quantity: int
    total_price: Decimal
    date_created: datetime
    items: List[OrderItemReadDTO] = []
