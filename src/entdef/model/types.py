# Copyright 2026 EntDef Contributors
# SPDX-License-Identifier: Apache-2.0

"""Value types shared by entity definitions: colors, vectors, and boxes."""

from __future__ import annotations

from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict

# ###############
# Public Interface
# ###############


class Color(BaseModel):
    """An RGBA color with float channels in [0, 1]."""

    model_config = ConfigDict(frozen=True)

    r: float
    g: float
    b: float
    a: float = 1.0

    @classmethod
    def from_channels(cls, channels: Sequence[float]) -> Color:
        """Build an opaque color from three channel values.

        A channel above 1.0 is read as an 8-bit value and divided by 255.
        Alpha is always 1.0.
        """
        r, g, b = (value / 255.0 if value > 1.0 else value for value in channels)
        return cls(r=r, g=g, b=b, a=1.0)

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self.r, self.g, self.b, self.a)


class Vec3(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: float
    y: float
    z: float

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)


class BoundingBox(BaseModel):
    """An axis-aligned box; ``min`` is componentwise less than or equal to ``max``."""

    model_config = ConfigDict(frozen=True)

    min: Vec3
    max: Vec3

    @classmethod
    def from_corners(cls, first: Vec3, second: Vec3) -> BoundingBox:
        """Build a box from two opposite corners given in any order."""
        return cls(
            min=Vec3(x=min(first.x, second.x), y=min(first.y, second.y), z=min(first.z, second.z)),
            max=Vec3(x=max(first.x, second.x), y=max(first.y, second.y), z=max(first.z, second.z)),
        )

    def size(self) -> Vec3:
        return Vec3(x=self.max.x - self.min.x, y=self.max.y - self.min.y, z=self.max.z - self.min.z)

    def volume(self) -> float:
        extent = self.size()
        return extent.x * extent.y * extent.z
