from django.urls import path
from .views import CheckoutPingView, PurchaseView, PaymentIntentView
from .views import OrderHistoryView, OrderDetailView
app_name = "checkout"

urlpatterns = [
    path("ping/", CheckoutPingView.as_view(), name="ping"),
    path("purchase/", PurchaseView.as_view(), name="purchase"),
    path("payment-intent/", PaymentIntentView.as_view(), name="payment-intent"),
    path("orders/", OrderHistoryView.as_view(), name="orders-history"),  # GET ?email=
    path("orders/<uuid:tracking_number>/", OrderDetailView.as_view(), name="orders-detail"),
]
