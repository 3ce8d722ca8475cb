"""
Geodetic to Cartesian conversion on a spherical reference body.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class GeoPosition:
    """
    A location relative to a reference body's surface.

    Attributes:
        latitude: degrees, [-90, 90]
        longitude: degrees; any value, wrapped through trig
        height: distance above the surface in the body's length unit; may be negative
        reference_body: identifier of the body node
        radius: body radius; must be positive (not validated)
    """
    latitude: float
    longitude: float
    height: float
    reference_body: str
    radius: float

    def __post_init__(self) -> None:
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"Latitude must be within [-90, 90], got {self.latitude}")

    def to_cartesian(self) -> np.ndarray:
        return to_cartesian(self)


def surface_normal(latitude: float, longitude: float) -> np.ndarray:
    lat = math.radians(latitude)
    lon = math.radians(longitude)
    return np.array([
        math.cos(lat) * math.cos(lon),
        math.cos(lat) * math.sin(lon),
        math.sin(lat),
    ])


def to_cartesian(geo: GeoPosition) -> np.ndarray:
    """Point in the reference body's model space. The body is treated as a perfect sphere."""
    normal = surface_normal(geo.latitude, geo.longitude)
    return normal * geo.radius + geo.height * normal


__all__ = ['GeoPosition', 'surface_normal', 'to_cartesian']
