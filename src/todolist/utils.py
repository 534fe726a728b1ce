import os
import time
from datetime import UTC, datetime
from uuid import UUID


def now() -> datetime:
    return datetime.now(UTC)


def uuid7() -> UUID:
    """Generate a time-ordered UUID (RFC 9562, version 7).

    48 bits of Unix milliseconds followed by random bits, so ids sort by creation time.
    """
    timestamp_ms = time.time_ns() // 1_000_000
    value = (timestamp_ms & 0xFFFF_FFFF_FFFF) << 80 | int.from_bytes(os.urandom(10), "big")
    value = value & ~(0xF << 76) | 0x7 << 76  # version
    value = value & ~(0x3 << 62) | 0x2 << 62  # RFC 4122 variant
    return UUID(int=value)
