"""Bit layout of the 64-bit identifier.

An identifier packs, from most to least significant bit::

    | 1 reserved | timestamp | datacenter | worker | sequence |

The reserved top bit is always zero so values stay positive when stored as a
signed 64-bit integer. Every generator that must interoperate shares the same
:class:`IdentifierLayout`.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Final

from idforge.core.errors import InvalidConfiguration, InvalidIdentifier

DEFAULT_EPOCH: Final[int] = 1480166465631
DEFAULT_DATACENTER_BITS: Final[int] = 5
DEFAULT_WORKER_BITS: Final[int] = 5
DEFAULT_SEQUENCE_BITS: Final[int] = 12

ID_BITS: Final[int] = 64
USABLE_BITS: Final[int] = ID_BITS - 1
MAX_UINT64: Final[int] = (1 << ID_BITS) - 1
UNIX_EPOCH: Final[datetime] = datetime(1970, 1, 1, tzinfo=UTC)


@dataclass(frozen=True)
class DecodedId:
    """Components extracted from an identifier."""

    timestamp_ms: int
    datacenter_id: int
    worker_id: int
    sequence: int

    @property
    def created_at(self) -> datetime | None:
        """Return the timestamp component as an aware UTC datetime.

        Narrow layouts can decode timestamps past the year 9999; those have no
        datetime form and yield ``None``.
        """
        try:
            return UNIX_EPOCH + timedelta(milliseconds=self.timestamp_ms)
        except OverflowError:
            return None


@dataclass(frozen=True)
class IdentifierLayout:
    """Immutable partition of the 63 usable bits plus the epoch.

    Attributes:
        epoch: Reference instant in milliseconds since the Unix epoch.
        datacenter_bits: Width of the datacenter field.
        worker_bits: Width of the worker field.
        sequence_bits: Width of the per-millisecond sequence field.

    Raises:
        InvalidConfiguration: If a width is negative, the epoch is negative, or
            the node and sequence fields leave no room for a timestamp.
    """

    epoch: int = DEFAULT_EPOCH
    datacenter_bits: int = DEFAULT_DATACENTER_BITS
    worker_bits: int = DEFAULT_WORKER_BITS
    sequence_bits: int = DEFAULT_SEQUENCE_BITS

    def __post_init__(self) -> None:
        if self.epoch < 0:
            raise InvalidConfiguration("epoch", self.epoch)
        for name in ("datacenter_bits", "worker_bits", "sequence_bits"):
            width = getattr(self, name)
            if width < 0:
                raise InvalidConfiguration(name, width)
        used = self.datacenter_bits + self.worker_bits + self.sequence_bits
        if used >= USABLE_BITS:
            raise InvalidConfiguration(
                "bit_widths",
                used,
                message=(
                    f"datacenter, worker and sequence bits use {used} of {USABLE_BITS} "
                    "usable bits, leaving none for the timestamp"
                ),
            )

    @property
    def timestamp_bits(self) -> int:
        return USABLE_BITS - self.datacenter_bits - self.worker_bits - self.sequence_bits

    @property
    def max_datacenter_id(self) -> int:
        return (1 << self.datacenter_bits) - 1

    @property
    def max_worker_id(self) -> int:
        return (1 << self.worker_bits) - 1

    @property
    def max_sequence(self) -> int:
        return (1 << self.sequence_bits) - 1

    @property
    def max_timestamp(self) -> int:
        """Largest encodable number of milliseconds since the epoch."""
        return (1 << self.timestamp_bits) - 1

    @property
    def worker_shift(self) -> int:
        return self.sequence_bits

    @property
    def datacenter_shift(self) -> int:
        return self.sequence_bits + self.worker_bits

    @property
    def timestamp_shift(self) -> int:
        return self.sequence_bits + self.worker_bits + self.datacenter_bits

    def validate_node(self, datacenter_id: int, worker_id: int) -> None:
        """Check that a node identity fits this layout.

        Raises:
            InvalidConfiguration: If either id is outside its allotted range.
        """
        if not 0 <= datacenter_id <= self.max_datacenter_id:
            raise InvalidConfiguration("datacenter_id", datacenter_id, self.max_datacenter_id)
        if not 0 <= worker_id <= self.max_worker_id:
            raise InvalidConfiguration("worker_id", worker_id, self.max_worker_id)

    def encode(self, timestamp_ms: int, datacenter_id: int, worker_id: int, sequence: int) -> int:
        """Pack components into an identifier.

        Inputs are assumed to be in range; the generator checks them before
        calling this.
        """
        return (
            ((timestamp_ms - self.epoch) << self.timestamp_shift)
            | (datacenter_id << self.datacenter_shift)
            | (worker_id << self.worker_shift)
            | sequence
        )

    def decode(self, identifier: int) -> DecodedId:
        """Split an identifier back into its components.

        Any unsigned 64-bit value is decodable; zero yields the epoch and zero
        fields.

        Raises:
            InvalidIdentifier: If the value is negative or wider than 64 bits.
        """
        if not 0 <= identifier <= MAX_UINT64:
            raise InvalidIdentifier(identifier)
        return DecodedId(
            timestamp_ms=(identifier >> self.timestamp_shift) + self.epoch,
            datacenter_id=(identifier >> self.datacenter_shift) & self.max_datacenter_id,
            worker_id=(identifier >> self.worker_shift) & self.max_worker_id,
            sequence=identifier & self.max_sequence,
        )

    def lower_bound(self, timestamp_ms: int) -> int:
        """Return the smallest identifier any node could issue at ``timestamp_ms``.

        Timestamps before the epoch clamp to zero; timestamps past the last
        encodable millisecond clamp to ``epoch + max_timestamp``.
        """
        elapsed = min(max(timestamp_ms - self.epoch, 0), self.max_timestamp)
        return elapsed << self.timestamp_shift

    def upper_bound(self, timestamp_ms: int) -> int:
        """Return the largest identifier any node could issue at ``timestamp_ms``.

        Clamps the same way as :meth:`lower_bound`.
        """
        return self.lower_bound(timestamp_ms) | ((1 << self.timestamp_shift) - 1)
