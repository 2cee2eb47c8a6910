"""Identifier generation for orders.

- order_id: business-facing id, random UUID4 string.
- reference: gateway correlation key, 32 hex chars (16 random bytes).
"""

import secrets
import uuid


def generate_order_id() -> str:
    return str(uuid.uuid4())


def generate_reference() -> str:
    return secrets.token_hex(16)
