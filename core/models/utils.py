"""ID generation utility."""

import secrets


def gen_id(prefix: str) -> str:
    """Generate prefixed opaque IDs: usr_xxx for identities, msg_xxx for messages."""
    return f"{prefix}{secrets.token_urlsafe(12)}"
