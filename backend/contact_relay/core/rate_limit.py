# contact_relay/core/rate_limit.py
# Per-address counters live in process memory and reset on restart.
from slowapi import Limiter
from slowapi.util import get_remote_address


def build_limiter() -> Limiter:
    return Limiter(key_func=get_remote_address, strategy="moving-window")
