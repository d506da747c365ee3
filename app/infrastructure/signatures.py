import hashlib
import hmac
from typing import Optional, Union


def sign(secret: str, message: Union[str, bytes]) -> str:
    """Hex HMAC-SHA256, the format the gateway uses for callbacks and webhooks."""
    if isinstance(message, str):
        message = message.encode()
    return hmac.new(secret.encode(), message, hashlib.sha256).hexdigest()


def payment_signature(secret: str, gateway_order_id: str, payment_id: str) -> str:
    return sign(secret, f"{gateway_order_id}|{payment_id}")


def verify_payment_signature(
    secret: str,
    gateway_order_id: str,
    payment_id: str,
    signature: Optional[str],
) -> bool:
    if not (gateway_order_id and payment_id and signature):
        return False
    expected = payment_signature(secret, gateway_order_id, payment_id)
    return hmac.compare_digest(expected, signature)


def verify_webhook_signature(secret: str, raw_body: bytes, signature: Optional[str]) -> bool:
    if not signature:
        return False
    return hmac.compare_digest(sign(secret, raw_body), signature)
