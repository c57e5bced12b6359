"""HTTP views for the checkout app.

Views are kept intentionally small: they validate requests (via Pydantic),
map them to domain values, delegate to the ``CheckoutService`` returned by
``providers.get_checkout_service()`` and translate outcomes to HTTP.

Idempotency: ``POST purchase/`` accepts an ``Idempotency-Key`` header. The
first request creates a record and, upon completion, stores the response;
retries with the same payload replay it. Payloads are compared after validation,
so camelCase and snake_case spellings of one purchase match. Reusing the key with a different
payload, or while the first request is still running, returns HTTP 409.
``POST payment-intent/`` forwards the header to the payment gateway.
"""

import logging

import stripe
from django.core.paginator import Paginator
from pydantic import ValidationError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView

from . import providers
from .domain import normalize_email
from .errors import ConflictError, StoreError
from .idempotency import finalize, get_or_create_idempotent, release
from .models import OrderModel
from .schemas import OrderReadDTO, PaymentInfoDTO, PurchaseDTO

logger = logging.getLogger("checkout")

MAX_PAGE_SIZE = 100


def _positive_int(raw, default: int) -> int:
    if raw is None:
        return default
    value = int(raw)
    if value < 1:
        raise ValueError(raw)
    return value


def _order_body(o: OrderModel) -> dict:
    dto = OrderReadDTO(
        tracking_number=o.tracking_number,
        total_quantity=o.total_quantity,
        total_price=o.total_price,
        date_created=o.date_created,
        items=[
            {
                "product_id": it.product_id,
                "quantity": it.quantity,
                "unit_price": it.unit_price,
                "image_url": it.image_url,
            }
            for it in o.items.all()
        ],
    )
    return dto.model_dump(mode="json")


class CheckoutPingView(APIView):
    """Health-check endpoint for the checkout module."""

    def get(self, request):
        return Response({"ok": True})


class PurchaseView(APIView):
    """Place an order from a checkout submission."""

    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "checkout_purchase"

    def post(self, request):
        """Place an order.

        Args:
            request (Request): DRF request with JSON body and optional
                ``Idempotency-Key`` header.

        Returns:
            Response: One of the following responses.
            - 201 with {order_tracking_number} when the order is saved.
            - 200/201 replay of the stored body for a retried key.
            - 400 for DTO validation errors.
            - 409 with {detail: "IDEMPOTENCY_CONFLICT" |
              "IDEMPOTENCY_IN_PROGRESS" | "CUSTOMER_CONFLICT"}.
            - 422 with {detail: "EMPTY_ORDER"} for an order without items.
            - 503 with {detail: "STORE_UNAVAILABLE"} when saving failed.
        """
        idem_key = request.headers.get("Idempotency-Key")

        # 1) Pydantic validation
        try:
            dto = PurchaseDTO.model_validate(request.data)
        except ValidationError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)

        # 2) Idempotency get-or-create
        rec = None
        if idem_key:
            try:
                existing, rec = get_or_create_idempotent(idem_key, dto.model_dump(mode="json"))
            except ValueError as e:
                return Response({"detail": str(e)}, status=status.HTTP_409_CONFLICT)
            if existing:
                resp = Response(rec.response_body, status=rec.response_status)
                resp["Idempotent-Replay"] = "true"
                return resp

        # 3) Domain
        service = providers.get_checkout_service()
        try:
            out = service.place_order(dto.to_domain())
        except ValueError as e:
            body = {"detail": str(e)}
            if rec:
                finalize(rec, status.HTTP_422_UNPROCESSABLE_ENTITY, body)
            return Response(body, status=status.HTTP_422_UNPROCESSABLE_ENTITY)
        except ConflictError:
            logger.warning("checkout conflict")
            if rec:
                release(rec)
            return Response({"detail": "CUSTOMER_CONFLICT"}, status=status.HTTP_409_CONFLICT)
        except StoreError:
            logger.exception("checkout store failure")
            if rec:
                release(rec)
            return Response({"detail": "STORE_UNAVAILABLE"}, status=status.HTTP_503_SERVICE_UNAVAILABLE)
        except Exception:
            if rec:
                release(rec)
            raise

        # 4) Response
        body = {"order_tracking_number": out.order_tracking_number}
        if rec:
            finalize(rec, status.HTTP_201_CREATED, body, tracking_number=out.order_tracking_number)
        return Response(body, status=status.HTTP_201_CREATED)


class PaymentIntentView(APIView):
    """Create a payment intent and return the gateway's handle."""

    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "checkout_payment_intent"

    def post(self, request):
        """Create a payment intent.

        Returns:
            Response: 200 with the gateway's intent, 400 for DTO validation
            errors, or the mapped gateway failure: 402 for card errors, 400
            for requests the gateway rejected, 502 otherwise.
        """
        try:
            dto = PaymentInfoDTO.model_validate(request.data)
        except ValidationError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)

        service = providers.get_checkout_service()
        try:
            intent = service.create_payment_intent(
                dto.to_domain(), idempotency_key=request.headers.get("Idempotency-Key")
            )
        except stripe.StripeError as e:
            logger.warning("payment gateway error", extra={"error_type": type(e).__name__, "code": e.code})
            if isinstance(e, stripe.CardError):
                status_code = status.HTTP_402_PAYMENT_REQUIRED
            elif isinstance(e, stripe.InvalidRequestError):
                status_code = status.HTTP_400_BAD_REQUEST
            else:
                status_code = status.HTTP_502_BAD_GATEWAY
            body = {"detail": "GATEWAY_ERROR", "code": e.code, "message": e.user_message or str(e)}
            return Response(body, status=status_code)

        if isinstance(intent, stripe.StripeObject):
            intent = intent.to_dict()
        return Response(intent, status=status.HTTP_200_OK)


class OrderHistoryView(APIView):
    """Paginated order history of one customer, newest first."""

    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "checkout_orders"

    def get(self, request):
        email = request.GET.get("email")
        if not email:
            return Response({"detail": "EMAIL_REQUIRED"}, status=status.HTTP_400_BAD_REQUEST)

        qs = (
            OrderModel.objects.filter(customer__email=normalize_email(email))
            .prefetch_related("items")
            .order_by("-date_created", "-pk")
        )
        try:
            page = _positive_int(request.GET.get("page"), 1)
            page_size = min(_positive_int(request.GET.get("page_size"), 20), MAX_PAGE_SIZE)
        except ValueError:
            return Response({"detail": "INVALID_PAGINATION"}, status=status.HTTP_400_BAD_REQUEST)
        p = Paginator(qs, page_size)
        page_obj = p.get_page(page)

        return Response(
            {
                "count": p.count,
                "page": page_obj.number,
                "page_size": page_size,
                "results": [_order_body(o) for o in page_obj.object_list],
            },
            status=200,
        )


class OrderDetailView(APIView):
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "checkout_orders"

    def get(self, request, tracking_number):
        try:
            o = OrderModel.objects.prefetch_related("items").get(tracking_number=str(tracking_number))
        except OrderModel.DoesNotExist:
            return Response({"detail": "NOT_FOUND"}, status=status.HTTP_404_NOT_FOUND)
        return Response(_order_body(o), status=200)
