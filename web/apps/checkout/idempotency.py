"""Idempotency utilities for safely handling duplicate checkout requests.

This module stores and retrieves idempotency keys to de-duplicate purchase
submissions. It supports creating an idempotent record, detecting conflicts
when the same key is used with a different payload or while the first
request is still running, finalizing a stored response so retries can
short-circuit, and releasing a key after a retryable failure.
"""

import hashlib
import json

from django.db import IntegrityError, transaction

from .models import IdempotencyKey


def _hash(payload: dict) -> str:
    """Compute a stable SHA-256 hash for a JSON-serializable payload.

    The payload is serialized with sorted keys and compact separators to
    ensure a deterministic representation before hashing.
    """
    body = json.dumps(payload, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(body.encode("utf-8")).hexdigest()


@transaction.atomic
def get_or_create_idempotent(key: str, payload: dict):
    """Get-or-create an idempotency record for the given key and payload.

    Behavior:
        - New key: create a record and return ``(False, rec)``; the caller
          runs the request and then calls ``finalize`` or ``release``.
        - Known key, same payload, response stored: return ``(True, rec)``
          so the caller can replay it.
        - Known key, same payload, no response yet: raise
          ``ValueError("IDEMPOTENCY_IN_PROGRESS")``.
        - Known key, different payload: raise
          ``ValueError("IDEMPOTENCY_CONFLICT")``.

    The create path runs in a nested savepoint so an IntegrityError only
    rolls back that block; the existing record is then read under a
    row-level lock (SELECT ... FOR UPDATE).

    Args:
        key: Client-provided idempotency key.
        payload: Request payload used to compute the request hash.

    Returns:
        tuple[bool, IdempotencyKey]: (existing, rec).
    """
    h = _hash(payload)

    try:
        with transaction.atomic():
            rec = IdempotencyKey.objects.create(
                key=key, request_hash=h, response_status=0, response_body={}
            )
            return False, rec
    except IntegrityError:
        rec = IdempotencyKey.objects.select_for_update().get(key=key)
        if rec.request_hash != h:
            raise ValueError("IDEMPOTENCY_CONFLICT")
        if rec.response_status == 0:
            raise ValueError("IDEMPOTENCY_IN_PROGRESS")
        return True, rec


def finalize(rec: IdempotencyKey, status_code: int, body: dict, tracking_number=None):
    """Persist the final response for an idempotent request.

    Args:
        rec: The idempotency record to update.
        status_code: HTTP status code to store for the response.
        body: JSON-serializable response body to persist.
        tracking_number: Tracking number of the order created, if any.
    """
    rec.response_status = status_code
    rec.response_body = body
    if tracking_number is not None:
        rec.order_tracking_number = tracking_number
    rec.save(update_fields=["response_status", "response_body", "order_tracking_number"])


def release(rec: IdempotencyKey):
    """Forget a key whose request failed in a retryable way."""
    rec.delete()
