"""Stateful services for the idforge application."""

from .generator import GeneratorState, IdGenerator, new_generator
from .registry import get_id_generator, reset_id_generator

__all__ = [
    "GeneratorState",
    "IdGenerator",
    "new_generator",
    "get_id_generator",
    "reset_id_generator",
]
