"""
Internal binary format engine for `.hat` containers.

Pure functions over in-memory bytes. Every read is bounds-checked and every
step returns the number of bytes it consumed (or the next offset) instead of
moving a shared cursor.
"""

from hatunpack._format.spec import ContainerVariant, BaseKeyClass
from hatunpack._format.record import DecodedRecord
from hatunpack._format.reader import (
    DecodeError,
    StructuralError,
    InvalidBaseKey,
    UnsupportedVariant,
    read_sized_string,
    classify,
    extract_iv,
    classify_base_key,
    validate_base_key,
    parse_record,
)
