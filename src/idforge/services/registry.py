"""Process-wide generator lifecycle.

One generator per node is created on first use and reused until the process
exits. Tests and reconfiguration call :func:`reset_id_generator`.
"""

from __future__ import annotations

import logging
import threading

from idforge.core.layout import IdentifierLayout
from idforge.core.settings import Settings, settings
from idforge.services.generator import IdGenerator

logger = logging.getLogger(__name__)


def build_layout(config: Settings) -> IdentifierLayout:
    """Return the identifier layout described by ``config``."""
    return IdentifierLayout(
        epoch=config.epoch_ms,
        datacenter_bits=config.datacenter_bits,
        worker_bits=config.worker_bits,
        sequence_bits=config.sequence_bits,
    )


def build_generator(config: Settings) -> IdGenerator:
    """Construct a generator for the node identity in ``config``.

    Raises:
        InvalidConfiguration: If the layout or node identity is invalid.
    """
    return IdGenerator(
        config.datacenter_id,
        config.worker_id,
        build_layout(config),
        wait_timeout_ms=config.sequence_wait_timeout_ms,
        spin_sleep_seconds=config.spin_sleep_seconds,
    )


class _IdGeneratorSingleton:
    """Singleton wrapper for IdGenerator."""

    _instance: IdGenerator | None = None
    _lock = threading.Lock()

    @classmethod
    def get_instance(cls) -> IdGenerator:
        """Get or create the singleton IdGenerator instance."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = build_generator(settings)
                    logger.info(
                        "Identifier generator ready (datacenter=%d worker=%d epoch=%d)",
                        cls._instance.datacenter_id,
                        cls._instance.worker_id,
                        cls._instance.layout.epoch,
                    )
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        with cls._lock:
            cls._instance = None


def get_id_generator() -> IdGenerator:
    """Return the singleton generator for this process."""
    return _IdGeneratorSingleton.get_instance()


def reset_id_generator() -> None:
    """Drop the singleton so the next call rebuilds it from settings."""
    _IdGeneratorSingleton.reset()
