"""Coordination-free 64-bit identifier generation."""

from idforge.core.errors import (
    ClockRolledBack,
    IdGeneratorError,
    InvalidConfiguration,
    InvalidIdentifier,
    SequenceWaitTimeout,
    TimestampOutOfRange,
)
from idforge.core.layout import DecodedId, IdentifierLayout
from idforge.services.generator import GeneratorState, IdGenerator, new_generator

__all__ = [
    "ClockRolledBack",
    "DecodedId",
    "GeneratorState",
    "IdGenerator",
    "IdGeneratorError",
    "IdentifierLayout",
    "InvalidConfiguration",
    "InvalidIdentifier",
    "SequenceWaitTimeout",
    "TimestampOutOfRange",
    "new_generator",
]
