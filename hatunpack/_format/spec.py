"""
Container Format Specification.

Complex container (all integers little-endian):
    offset 0         int32    IV length          (observed: 16)
    offset 4         byte[n]  IV
    offset 4+n       byte[]   ciphertext         (AES-CBC, base key + IV)

Decrypted base section:
    offset 0         int64    base-key magic
    [if specific]    sized    extra string       (consumed, discarded)
    offset X         byte[8]  reserved
    offset X+8       sized    team name
    ...              int32    image size
    ...              byte[m]  image bytes

Simple container (rare/legacy):
    offset 0         int64    magic == 630430777029345
    offset 8         record   (same layout as above, starting at reserved)

Sized string:
    int8 length n (0-127) followed by n UTF-8 bytes, no terminator.
"""

from __future__ import annotations

import enum
import struct

# Fixed-size fields
MAGIC_STRUCT = struct.Struct("<q")    # int64 magic / base key
LENGTH_STRUCT = struct.Struct("<i")   # int32 IV length / image size
SIZE_PREFIX_STRUCT = struct.Struct("<b")  # int8 sized-string length

MAGIC_SIZE = MAGIC_STRUCT.size
IV_LENGTH_SIZE = LENGTH_STRUCT.size
IMAGE_SIZE_SIZE = LENGTH_STRUCT.size
RESERVED_SIZE = 8

# Longest text a sized string can carry (signed length byte)
MAX_SIZED_STRING = 127


class ContainerVariant(enum.Enum):
    """Top-level container type, decided once from the first 8 bytes."""

    SIMPLE = 1
    COMPLEX = 2


class BaseKeyClass(enum.Enum):
    """Classification of a decrypted base section's magic."""

    INVALID = 0
    PLAIN = 1
    SPECIFIC = 2

    @property
    def is_valid(self) -> bool:
        return self is not BaseKeyClass.INVALID
