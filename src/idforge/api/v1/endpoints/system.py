"""System and transparency endpoints for the idforge API."""

from __future__ import annotations

import time
from typing import Annotated

from fastapi import APIRouter, Depends

from idforge.core.settings import settings
from idforge.schemas.ids import LayoutOut
from idforge.services.generator import UNSET_TIMESTAMP, IdGenerator
from idforge.services.registry import get_id_generator

router = APIRouter(prefix="/system", tags=["system"])


def get_id_generator_dep() -> IdGenerator:
    """Get IdGenerator dependency for dependency injection."""
    return get_id_generator()


IdGeneratorDep = Annotated[IdGenerator, Depends(get_id_generator_dep)]


@router.get("/config")
async def get_public_config(generator: IdGeneratorDep) -> dict[str, object]:
    """Return a snapshot of the runtime configuration.

    Args:
        generator: Process-wide identifier generator

    Returns:
        Dictionary containing app metadata, the identifier layout, the node
        identity, and the sequence wait tuning
    """
    return {
        "app": {
            "name": settings.app_name,
            "version": settings.app_version,
            "debug": settings.debug,
        },
        "layout": LayoutOut.from_layout(generator.layout).model_dump(),
        "node": {
            "datacenter_id": generator.datacenter_id,
            "worker_id": generator.worker_id,
        },
        "generator": {
            "sequence_wait_timeout_ms": settings.sequence_wait_timeout_ms,
            "spin_sleep_seconds": settings.spin_sleep_seconds,
            "max_batch_size": settings.max_batch_size,
        },
    }


@router.get("/state")
def get_generator_state(generator: IdGeneratorDep) -> dict[str, object]:
    """Expose the generator's last issued millisecond and sequence.

    Runs in the threadpool: reading the state waits on the generator lock,
    which a batch may hold through a sequence-exhaustion wait.

    Returns:
        Dictionary with ``last_timestamp`` (None before the first identifier)
        and ``sequence``
    """
    state = generator.state
    last = None if state.last_timestamp == UNSET_TIMESTAMP else state.last_timestamp
    return {"last_timestamp": last, "sequence": state.sequence}


@router.get("/status")
async def get_system_status() -> dict[str, object]:
    """Get overall system status for monitoring dashboards.

    Returns:
        Dictionary with service information, version, status, and environment
    """
    return {
        "service": settings.app_name,
        "version": settings.app_version,
        "status": "operational",
        "timestamp": int(time.time()),
        "node": settings.node,
        "environment": "production" if not settings.debug else "development",
    }
