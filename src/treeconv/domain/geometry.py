"""Geometric value types.

Both models are frozen; conversions always build new instances.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class Vector3(BaseModel):
    """A point or direction in 3D space."""

    model_config = {"frozen": True}

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)


class Vector(BaseModel):
    """Variable-length numeric vector (configurations, velocities, ...)."""

    model_config = {"frozen": True}

    values: tuple[float, ...] = Field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.values)
