"""Identifier generation and inspection endpoints."""

from __future__ import annotations

import math
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from idforge.core.errors import (
    ClockRolledBack,
    InvalidIdentifier,
    SequenceWaitTimeout,
    TimestampOutOfRange,
)
from idforge.core.settings import settings
from idforge.schemas.ids import DecodedIdOut, GeneratedIdsOut, IdBoundsOut
from idforge.services.generator import IdGenerator
from idforge.services.registry import get_id_generator

MILLISECONDS_PER_SECOND = 1000

router = APIRouter(prefix="/ids", tags=["ids"])


def get_id_generator_dep() -> IdGenerator:
    """Get IdGenerator dependency for dependency injection."""
    return get_id_generator()


IdGeneratorDep = Annotated[IdGenerator, Depends(get_id_generator_dep)]


def _retry_after_seconds(rollback_ms: int) -> str:
    return str(max(1, math.ceil(rollback_ms / MILLISECONDS_PER_SECOND)))


@router.post("", response_model=GeneratedIdsOut, status_code=status.HTTP_201_CREATED)
def generate_ids(
    generator: IdGeneratorDep,
    count: Annotated[int, Query(ge=1)] = 1,
) -> GeneratedIdsOut:
    """Issue one or more identifiers from this node.

    Args:
        generator: Process-wide identifier generator
        count: Number of identifiers to issue, at most the configured batch size

    Returns:
        The identifiers in issue order together with the issuing node identity

    Raises:
        HTTPException: 422 when the batch is too large, 503 when the clock moved
            backwards or did not advance in time, 500 when the clock is outside
            the encodable range
    """
    if count > settings.max_batch_size:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"count must not exceed {settings.max_batch_size}",
        )
    try:
        ids = generator.generate_many(count)
    except ClockRolledBack as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={
                "error": "clock_rolled_back",
                "message": str(exc),
                "rollback_ms": exc.rollback_ms,
            },
            headers={"Retry-After": _retry_after_seconds(exc.rollback_ms)},
        ) from exc
    except SequenceWaitTimeout as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"error": "sequence_wait_timeout", "message": str(exc)},
            headers={"Retry-After": "1"},
        ) from exc
    except TimestampOutOfRange as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "timestamp_out_of_range", "message": str(exc)},
        ) from exc

    return GeneratedIdsOut(
        ids=ids,
        ids_str=[str(value) for value in ids],
        datacenter_id=generator.datacenter_id,
        worker_id=generator.worker_id,
    )


@router.get("/bounds/{timestamp_ms}", response_model=IdBoundsOut)
def get_id_bounds(timestamp_ms: int, generator: IdGeneratorDep) -> IdBoundsOut:
    """Return the identifier range covering one millisecond across all nodes.

    Useful for "created after" range queries over stored identifiers.
    """
    layout = generator.layout
    return IdBoundsOut(
        timestamp_ms=timestamp_ms,
        lower=layout.lower_bound(timestamp_ms),
        upper=layout.upper_bound(timestamp_ms),
    )


@router.get("/{identifier}", response_model=DecodedIdOut)
def decode_id(identifier: int, generator: IdGeneratorDep) -> DecodedIdOut:
    """Decode an identifier into timestamp, node and sequence components.

    Raises:
        HTTPException: 422 when the value is not an unsigned 64-bit integer
    """
    try:
        decoded = generator.decode(identifier)
    except InvalidIdentifier as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        ) from exc
    return DecodedIdOut.from_decoded(identifier, decoded)
