"""Webhook signature check.

Paystack signs every event: header `x-paystack-signature` is the hex
HMAC-SHA512 of the raw request body keyed with the account secret key.
"""
import hashlib
import hmac

SIGNATURE_HEADER = "x-paystack-signature"


def compute_signature(body: bytes, secret: str) -> str:
    return hmac.new(secret.encode("utf-8"), body, hashlib.sha512).hexdigest()


def is_valid_signature(body: bytes, signature: str | None, secret: str) -> bool:
    if not signature or not secret:
        return False
    return hmac.compare_digest(compute_signature(body, secret), signature)
