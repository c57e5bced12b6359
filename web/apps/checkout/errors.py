"""Storage errors raised through the checkout ports.

Domain rule violations keep using ``ValueError`` with a short upper-case
code (for example ``EMPTY_ORDER``). Gateway failures are not wrapped: they
reach the caller as the gateway client's own exceptions.
"""


class StoreError(Exception):
    """The customer store could not complete a read or write.

    Raised for unavailable storage and for constraint violations other than
    the customer email uniqueness race. The surrounding transaction has been
    rolled back when this propagates.
    """


class ConflictError(StoreError):
    """Another writer created a customer with the same email first.

    The conflict is retryable: repeating the lookup will now find the
    committed customer.
    """
