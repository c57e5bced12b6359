from django.conf import settings
from django.db import DatabaseError, connection
from django.http import JsonResponse


def health_view(_request):
    """Report database reachability and which payment gateway is wired.

    Returns 200 when the database answers, 503 otherwise.
    """
    db_ok = False
    try:
        with connection.cursor() as cur:
            cur.execute("SELECT 1;")
        db_ok = True
    except DatabaseError:
        db_ok = False

    gateway = "stripe" if getattr(settings, "USE_STRIPE_GATEWAY", False) else "stub"
    return JsonResponse(
        {"ok": db_ok, "components": {"db": {"ok": db_ok}, "payments_gateway": {"mode": gateway}}},
        status=200 if db_ok else 503,
    )
