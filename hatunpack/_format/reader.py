"""
Reader — bounds-checked field parsers for hat containers.

Every parser takes a buffer and an offset and returns what it read together
with the number of bytes consumed (or the next offset). Nothing moves a shared
cursor, so each step can be called and tested on its own.

Reads that would run past the end of the buffer raise StructuralError
instead of returning truncated data.
"""

from __future__ import annotations

import logging

from hatunpack import HAT_SIMPLE_MAGIC, HAT_PLAIN_BASE_MAGICS, HAT_SPECIFIC_BASE_MAGICS
from hatunpack._format.record import DecodedRecord
from hatunpack._format.spec import (
    MAGIC_STRUCT, LENGTH_STRUCT, SIZE_PREFIX_STRUCT,
    MAGIC_SIZE, IV_LENGTH_SIZE, IMAGE_SIZE_SIZE, RESERVED_SIZE, MAX_SIZED_STRING,
    ContainerVariant, BaseKeyClass,
)

log = logging.getLogger(__name__)


class DecodeError(Exception):
    """Base class for every hat decoding failure."""


class StructuralError(DecodeError):
    """Buffer too short for a declared field, or a field is malformed."""


class InvalidBaseKey(DecodeError):
    """Decrypted base section starts with an unrecognized magic."""

    def __init__(self, magic: int | None = None) -> None:
        self.magic = magic
        detail = f" (magic {magic})" if magic is not None else ""
        super().__init__(f"Corrupted base section of hat file{detail}")


class UnsupportedVariant(DecodeError):
    """Recognized container sub-type that this decoder does not handle."""


def _require(buffer: bytes, offset: int, size: int, what: str) -> None:
    """Raise StructuralError unless ``size`` bytes at ``offset`` are available."""
    if offset < 0 or offset + size > len(buffer):
        raise StructuralError(
            f"Buffer too short for {what}: need {size} bytes at offset {offset}, "
            f"have {max(len(buffer) - offset, 0)}"
        )


def _read_int64(buffer: bytes, offset: int, what: str) -> int:
    _require(buffer, offset, MAGIC_SIZE, what)
    return MAGIC_STRUCT.unpack_from(buffer, offset)[0]


def _read_int32(buffer: bytes, offset: int, what: str) -> int:
    _require(buffer, offset, LENGTH_STRUCT.size, what)
    return LENGTH_STRUCT.unpack_from(buffer, offset)[0]


def read_sized_string(buffer: bytes, offset: int = 0) -> tuple[str, int]:
    """Read a length-prefixed UTF-8 string.

    Layout: one signed length byte ``n`` followed by ``n`` UTF-8 bytes.

    Returns:
        (text, consumed) where ``consumed == n + 1``.

    Raises:
        StructuralError: If the length byte is negative or the text does not fit.
    """
    _require(buffer, offset, SIZE_PREFIX_STRUCT.size, "sized string length")
    length = SIZE_PREFIX_STRUCT.unpack_from(buffer, offset)[0]
    if length < 0:
        raise StructuralError(
            f"Negative sized string length {length} at offset {offset} "
            f"(expected 0-{MAX_SIZED_STRING})"
        )

    start = offset + SIZE_PREFIX_STRUCT.size
    _require(buffer, start, length, "sized string")
    text = bytes(buffer[start:start + length]).decode("utf-8", errors="replace")
    return text, length + SIZE_PREFIX_STRUCT.size


def classify(buffer: bytes) -> ContainerVariant:
    """Detect the container variant from the first 8 bytes."""
    magic = _read_int64(buffer, 0, "container magic")
    if magic == HAT_SIMPLE_MAGIC:
        return ContainerVariant.SIMPLE
    return ContainerVariant.COMPLEX


def extract_iv(buffer: bytes) -> tuple[bytes, int]:
    """Extract the initialization vector of a Complex container.

    Returns:
        (iv, iv_end) where ``iv_end`` is the offset the ciphertext starts at.
    """
    iv_length = _read_int32(buffer, 0, "IV length")
    if iv_length < 0:
        raise StructuralError(f"Negative IV length: {iv_length}")
    _require(buffer, IV_LENGTH_SIZE, iv_length, "IV")
    iv_end = IV_LENGTH_SIZE + iv_length
    return bytes(buffer[IV_LENGTH_SIZE:iv_end]), iv_end


def classify_base_key(magic: int) -> BaseKeyClass:
    """Classify an already-read base-key magic."""
    if magic in HAT_PLAIN_BASE_MAGICS:
        return BaseKeyClass.PLAIN
    if magic in HAT_SPECIFIC_BASE_MAGICS:
        return BaseKeyClass.SPECIFIC
    return BaseKeyClass.INVALID


def validate_base_key(plain: bytes) -> BaseKeyClass:
    """Classify the magic at the start of a decrypted base section.

    A wrong key/IV pairing still decrypts to plausible bytes, so this is the
    only integrity signal before trusting any offsets inside the section.
    """
    return classify_base_key(read_base_key(plain))


def read_base_key(plain: bytes) -> int:
    """Return the raw int64 base-key magic of a decrypted base section."""
    return _read_int64(plain, 0, "base key")


def parse_record(buffer: bytes, start: int = 0) -> DecodedRecord:
    """Parse a record: reserved(8) + sized team name + int32 size + image.

    Raises:
        StructuralError: If any field, or the declared image, does not fit.
    """
    _require(buffer, start, RESERVED_SIZE, "reserved header")
    offset = start + RESERVED_SIZE

    label, consumed = read_sized_string(buffer, offset)
    offset += consumed

    image_size = _read_int32(buffer, offset, "image size")
    offset += IMAGE_SIZE_SIZE
    if image_size < 0:
        raise StructuralError(f"Negative image size: {image_size}")
    _require(buffer, offset, image_size, "image payload")

    log.debug("Parsed record %r at offset %d (image %d bytes)", label, start, image_size)
    return DecodedRecord(
        label=label,
        declared_payload_length=image_size,
        payload_bytes=bytes(buffer[offset:offset + image_size]),
    )
