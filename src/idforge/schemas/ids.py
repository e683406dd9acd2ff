"""Schemas for identifier generation and inspection."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from idforge.core.layout import DecodedId, IdentifierLayout


class GeneratedIdsOut(BaseModel):
    """API response payload for a batch of freshly generated identifiers."""

    ids: list[int]
    ids_str: list[str] = Field(
        ...,
        description="Decimal strings of the same identifiers, safe for JavaScript clients.",
    )
    datacenter_id: int
    worker_id: int


class DecodedIdOut(BaseModel):
    """Components of a single identifier."""

    id: int
    id_str: str
    timestamp_ms: int
    timestamp: datetime | None = Field(
        default=None,
        description="UTC time of the timestamp component; null when it lies past year 9999.",
    )
    datacenter_id: int
    worker_id: int
    sequence: int

    @classmethod
    def from_decoded(cls, identifier: int, decoded: DecodedId) -> DecodedIdOut:
        return cls(
            id=identifier,
            id_str=str(identifier),
            timestamp_ms=decoded.timestamp_ms,
            timestamp=decoded.created_at,
            datacenter_id=decoded.datacenter_id,
            worker_id=decoded.worker_id,
            sequence=decoded.sequence,
        )


class IdBoundsOut(BaseModel):
    """Smallest and largest identifiers any node could issue in one millisecond."""

    timestamp_ms: int
    lower: int
    upper: int


class LayoutOut(BaseModel):
    """Bit layout shared by every cooperating generator."""

    epoch_ms: int
    timestamp_bits: int
    datacenter_bits: int
    worker_bits: int
    sequence_bits: int
    max_datacenter_id: int
    max_worker_id: int
    max_sequence: int
    timestamp_shift: int
    datacenter_shift: int
    worker_shift: int

    @classmethod
    def from_layout(cls, layout: IdentifierLayout) -> LayoutOut:
        return cls(
            epoch_ms=layout.epoch,
            timestamp_bits=layout.timestamp_bits,
            datacenter_bits=layout.datacenter_bits,
            worker_bits=layout.worker_bits,
            sequence_bits=layout.sequence_bits,
            max_datacenter_id=layout.max_datacenter_id,
            max_worker_id=layout.max_worker_id,
            max_sequence=layout.max_sequence,
            timestamp_shift=layout.timestamp_shift,
            datacenter_shift=layout.datacenter_shift,
            worker_shift=layout.worker_shift,
        )
