"""Decoded hat record — the terminal artifact handed back to callers."""

from __future__ import annotations

from dataclasses import dataclass

from hatunpack._format.spec import ContainerVariant


@dataclass(frozen=True)
class DecodedRecord:
    """A hat's team name and embedded image.

    Attributes:
        label: Team name stored in the record.
        declared_payload_length: Image size as declared by the int32 field.
        payload_bytes: Image bytes, exactly ``declared_payload_length`` long
            (a PNG in practice).
        variant: Container variant the record was recovered from.
        base_key: Base-key magic of a Complex container, None for Simple ones.
    """

    label: str
    declared_payload_length: int
    payload_bytes: bytes
    variant: ContainerVariant | None = None
    base_key: int | None = None

    def __repr__(self) -> str:
        return (
            f"DecodedRecord(label={self.label!r}, "
            f"declared_payload_length={self.declared_payload_length}, "
            f"variant={self.variant.name if self.variant else None})"
        )
