from django.apps import AppConfig
from django.conf import settings


class CheckoutConfig(AppConfig):
    name = "apps.checkout"
    label = "checkout"
    default_auto_field = "django.db.models.BigAutoField"

    def ready(self):
        if getattr(settings, "USE_STRIPE_GATEWAY", False):
            from .stripe_adapters import configure_stripe

            configure_stripe()
