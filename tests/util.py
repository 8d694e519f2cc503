import hashlib
import hmac
import json
import time
from uuid import uuid4

WEBHOOK_SECRET = "whsec_test_secret"


def signed_event(event_type: str, session_id: str, secret: str = WEBHOOK_SECRET, timestamp: int = None):
    """
    Creates a webhook payload and a matching ``Stripe-Signature``
    header, signed the way stripe signs them.
    """
    payload = json.dumps({
        "id": f"evt_{uuid4().hex}",
        "object": "event",
        "type": event_type,
        "data": {"object": {"id": session_id, "object": "checkout.session"}},
    }).encode()

    timestamp = int(time.time()) if timestamp is None else timestamp
    signature = hmac.new(secret.encode(), f"{timestamp}.".encode() + payload, hashlib.sha256).hexdigest()

    return payload, f"t={timestamp},v1={signature}"


def completed_event(session_id: str, **kwargs):
    return signed_event("checkout.session.completed", session_id, **kwargs)
