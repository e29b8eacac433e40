"""
Container decoder — end-to-end decoding of `.hat` containers.

Pipeline:
    Start -> Detected -> Parsed -> Done                              (Simple)
    Start -> Detected -> Decrypted -> Validated [-> Specific skip]
          -> Parsed -> Done                                          (Complex)

Any step may fail with a DecodeError subclass. Decoding is a pure function of
the input bytes and the fixed key: no state survives between calls, so
independent containers can be decoded concurrently.
"""

from __future__ import annotations

import dataclasses
import logging
import os
import tempfile
from pathlib import Path

from hatunpack import MAX_FILE_SIZE
from hatunpack._format.record import DecodedRecord
from hatunpack._format.reader import (
    InvalidBaseKey,
    classify,
    classify_base_key,
    parse_record,
    read_base_key,
    read_sized_string,
)
from hatunpack._format.spec import MAGIC_SIZE, BaseKeyClass, ContainerVariant
from hatunpack.crypto import decrypt_base

log = logging.getLogger(__name__)


def decode_base(raw: bytes) -> bytes:
    """Return the decrypted base section of a Complex container.

    Raises:
        ValueError: If ``raw`` is a Simple container (nothing to decrypt).
    """
    if classify(raw) is ContainerVariant.SIMPLE:
        raise ValueError("Simple containers have no encrypted base section")
    return decrypt_base(raw)


def _record_offset(base: bytes, key_class: BaseKeyClass) -> int:
    """Offset of the record inside a validated base section."""
    offset = MAGIC_SIZE
    if key_class is BaseKeyClass.SPECIFIC:
        # Extra field ahead of the record; its content is not interpreted.
        extra, consumed = read_sized_string(base, offset)
        log.debug("Skipping specific base field %r (%d bytes)", extra, consumed)
        offset += consumed
    return offset


def decode(raw: bytes) -> DecodedRecord:
    """Decode a hat container into its team name and image.

    Args:
        raw: Entire contents of one `.hat` file.

    Returns:
        The decoded record.

    Raises:
        StructuralError: If a declared field does not fit in the buffer.
        InvalidBaseKey: If the decrypted base section has an unknown magic.
    """
    variant = classify(raw)
    log.debug("Detected %s container (%d bytes)", variant.name, len(raw))

    if variant is ContainerVariant.SIMPLE:
        record = parse_record(raw, MAGIC_SIZE)
        return dataclasses.replace(record, variant=variant)

    base = decrypt_base(raw)
    magic = read_base_key(base)
    key_class = classify_base_key(magic)
    if not key_class.is_valid:
        raise InvalidBaseKey(magic)
    log.debug("Base key %d classified as %s", magic, key_class.name)

    record = parse_record(base, _record_offset(base, key_class))
    return dataclasses.replace(record, variant=variant, base_key=magic)


def _read_limited(path: str | Path, max_size: int) -> bytes:
    path = Path(path)
    file_size = path.stat().st_size
    if file_size > max_size:
        raise ValueError(
            f"File size {file_size} exceeds maximum {max_size} bytes. "
            f"Pass max_size= to override."
        )
    return path.read_bytes()


def decode_file(path: str | Path, max_size: int = MAX_FILE_SIZE) -> DecodedRecord:
    """Read and decode a `.hat` file."""
    return decode(_read_limited(path, max_size))


def decode_base_file(path: str | Path, max_size: int = MAX_FILE_SIZE) -> bytes:
    """Read a `.hat` file and return its decrypted base section."""
    return decode_base(_read_limited(path, max_size))


def _write_atomic(path: str | Path, data: bytes) -> int:
    """Write bytes to ``path`` atomically (temp file + os.replace)."""
    path = Path(path)
    dir_name = path.parent
    dir_name.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=dir_name, suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    except Exception:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise
    return len(data)


def export_record(path: str | Path, record: DecodedRecord) -> int:
    """Write a record's image payload to ``path``. Returns bytes written."""
    return _write_atomic(path, record.payload_bytes)


def export_base(path: str | Path, base: bytes) -> int:
    """Write a decrypted base section to ``path``. Returns bytes written."""
    return _write_atomic(path, base)
