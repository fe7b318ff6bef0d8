from __future__ import annotations

import secrets
import time


def new_object_id() -> str:
    """24-char hex id: 4-byte creation timestamp followed by 8 random bytes."""
    return f"{int(time.time()) & 0xFFFFFFFF:08x}{secrets.token_hex(8)}"
