from django.db import models


class CustomerModel(models.Model):
    first_name = models.CharField(max_length=255)
    last_name = models.CharField(max_length=255)
    # Normalized (lower-cased) email; one row per customer
    email = models.CharField(max_length=255, unique=True)

    class Meta:
        db_table = "customer"


class AddressModel(models.Model):
    street = models.CharField(max_length=255)
    city = models.CharField(max_length=255)
    state = models.CharField(max_length=255, blank=True, default="")
    country = models.CharField(max_length=255)
    zip_code = models.CharField(max_length=32)

    class Meta:
        db_table = "address"


class OrderModel(models.Model):
    # Public UUID4 string exposed in the API
    tracking_number = models.CharField(max_length=36, unique=True, editable=False)

    total_quantity = models.PositiveIntegerField(default=0)
    total_price = models.DecimalField(max_digits=19, decimal_places=2, default=0)
    customer = models.ForeignKey(CustomerModel, related_name="orders", on_delete=models.CASCADE)
    billing_address = models.OneToOneField(AddressModel, related_name="+", on_delete=models.PROTECT)
    shipping_address = models.OneToOneField(AddressModel, related_name="+", on_delete=models.PROTECT)
    date_created = models.DateTimeField(auto_now_add=True)
    last_updated = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "orders"
        ordering = ["-date_created"]


class OrderItemModel(models.Model):
    order = models.ForeignKey(OrderModel, related_name="items", on_delete=models.CASCADE)
    product_id = models.CharField(max_length=64)
    image_url = models.CharField(max_length=255, blank=True, default="")
    unit_price = models.DecimalField(max_digits=19, decimal_places=2)
    quantity = models.PositiveIntegerField()

    class Meta:
        db_table = "order_item"
        ordering = ["pk"]


class IdempotencyKey(models.Model):
    key = models.CharField(max_length=200, primary_key=True)
    # sha256 hex of the canonical request body
    request_hash = models.CharField(max_length=64)
    # 0 while the first request is still running
    response_status = models.PositiveSmallIntegerField(default=0)
    response_body = models.JSONField(default=dict)
    order_tracking_number = models.CharField(max_length=36, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "idempotency_keys"
