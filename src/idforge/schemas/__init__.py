"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .ids import DecodedIdOut, GeneratedIdsOut, IdBoundsOut, LayoutOut

__all__ = [
    "DecodedIdOut",
    "GeneratedIdsOut",
    "IdBoundsOut",
    "LayoutOut",
]
